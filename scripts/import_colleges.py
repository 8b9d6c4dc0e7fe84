"""
Seeds colleges and their grade bands from CSV.

data/colleges.csv     : name,grading_scale
data/grade_bands.csv  : college_name,letter,grade_point,min_percentage (optional)

Colleges without rows in grade_bands.csv get the default bands of their scale.
Existing colleges (same name) are skipped.
"""

import csv
import sys
from collections import defaultdict
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parent.parent))

from sqlalchemy.orm import Session  # noqa: E402
from database.db import Base, SessionLocal, engine  # noqa: E402
import models  # noqa: E402,F401
from models.colleges import College as CollegeModel, GradeBandRow  # noqa: E402  ✅ model import
from services.grade_scale import GRADING_SCALES, default_bands  # noqa: E402

COLLEGES_CSV = "data/colleges.csv"        # ✅ file paths
GRADE_BANDS_CSV = "data/grade_bands.csv"


def read_bands(path: str) -> dict:
    bands = defaultdict(list)
    if not Path(path).exists():
        return bands

    with open(path, newline="", encoding="utf-8-sig") as csvfile:
        for row in csv.DictReader(csvfile):
            bands[row["college_name"].strip()].append(
                GradeBandRow(
                    letter=row["letter"].strip(),
                    grade_point=float(row["grade_point"]),
                    min_percentage=float(row["min_percentage"]),
                )
            )
    return bands


def migrate_colleges(colleges_csv: str = COLLEGES_CSV, bands_csv: str = GRADE_BANDS_CSV) -> int:
    Base.metadata.create_all(bind=engine)
    db: Session = SessionLocal()
    bands_by_college = read_bands(bands_csv)
    created = 0

    try:
        with open(colleges_csv, newline="", encoding="utf-8-sig") as csvfile:
            for row in csv.DictReader(csvfile):
                name = row["name"].strip()
                scale = (row.get("grading_scale") or "TEN_POINT").strip().upper()
                if scale not in GRADING_SCALES:
                    print(f"⚠️  skipping {name}: unknown grading scale {scale}")
                    continue
                if db.query(CollegeModel).filter(CollegeModel.name == name).first():
                    continue

                college = CollegeModel(name=name, grading_scale=scale)
                college.grade_bands = bands_by_college.get(name) or [
                    GradeBandRow(letter=b.letter, grade_point=b.grade_point, min_percentage=b.min_percentage)
                    for b in default_bands(scale)
                ]
                db.add(college)
                created += 1

        db.commit()
    finally:
        db.close()

    print(f"✅ colleges CSV -> DB: {created} created")
    return created


if __name__ == "__main__":
    migrate_colleges()
