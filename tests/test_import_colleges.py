import api_case  # noqa: F401  (test settings)

import os
import tempfile
import unittest

from database.db import SessionLocal
from models.colleges import College as CollegeModel
from scripts.import_colleges import migrate_colleges


class ImportCollegesTests(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.colleges_csv = os.path.join(self.tmp.name, "colleges.csv")
        self.bands_csv = os.path.join(self.tmp.name, "grade_bands.csv")
        with open(self.colleges_csv, "w", encoding="utf-8") as f:
            f.write("name,grading_scale\n")
            f.write("Import Test University,FOUR_POINT\n")
            f.write("Import Custom College,TEN_POINT\n")
            f.write("Import Broken College,HUNDRED_POINT\n")
        with open(self.bands_csv, "w", encoding="utf-8") as f:
            f.write("college_name,letter,grade_point,min_percentage\n")
            f.write("Import Custom College,S,10,85\n")
            f.write("Import Custom College,F,0,0\n")

    def tearDown(self):
        self.tmp.cleanup()

    def test_import_is_idempotent(self):
        self.assertEqual(migrate_colleges(self.colleges_csv, self.bands_csv), 2)
        self.assertEqual(migrate_colleges(self.colleges_csv, self.bands_csv), 0)

        db = SessionLocal()
        try:
            four = db.query(CollegeModel).filter(CollegeModel.name == "Import Test University").one()
            self.assertEqual(four.grading_scale, "FOUR_POINT")
            self.assertEqual(len(four.grade_bands), 5)

            custom = db.query(CollegeModel).filter(CollegeModel.name == "Import Custom College").one()
            self.assertEqual(sorted(b.letter for b in custom.grade_bands), ["F", "S"])

            self.assertIsNone(db.query(CollegeModel).filter(CollegeModel.name == "Import Broken College").first())
        finally:
            db.close()


if __name__ == "__main__":
    unittest.main()
