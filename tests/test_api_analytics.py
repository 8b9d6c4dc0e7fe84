import csv
import io
import unittest

from api_case import ApiTestCase


class AnalyticsApiTests(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.headers = self.register()
        first = self.create_semester(self.headers, 1)["id"]
        self.create_subject(self.headers, first, "Math", 4, grade_point=8)
        self.create_subject(self.headers, first, "Physics", 4, grade_point=8)
        second = self.create_semester(self.headers, 2)["id"]
        self.create_subject(self.headers, second, "Chemistry", 4, grade_point=9)
        self.create_subject(self.headers, second, "Biology", 4, grade_point=7)
        self.create_subject(self.headers, second, "Project", 2)

    def get(self, path, **params):
        res = self.client.get(path, params=params, headers=self.headers)
        return res

    def test_cgpa(self):
        data = self.get("/v1/analytics/cgpa").json()["data"]
        self.assertEqual(data["cgpa"], 8.0)
        self.assertEqual(data["total_credits"], 16)
        self.assertEqual(data["graded_subjects"], 4)
        self.assertEqual(data["semester_count"], 2)
        self.assertEqual(data["scale_max"], 10.0)

    def test_cgpa_without_semesters(self):
        headers = self.register("student2")
        data = self.client.get("/v1/analytics/cgpa", headers=headers).json()["data"]
        self.assertEqual(data["cgpa"], 0)
        self.assertEqual(data["semester_count"], 0)

    def test_trend(self):
        data = self.get("/v1/analytics/trend").json()["data"]
        self.assertEqual([p["label"] for p in data], ["Semester 1", "Semester 2"])
        self.assertEqual([p["sgpa"] for p in data], [8.0, 8.0])
        self.assertEqual(data[1]["cgpa_to_date"], 8.0)

    def test_distribution_skips_pending(self):
        data = self.get("/v1/analytics/distribution").json()["data"]
        self.assertEqual(data["total"], 4)
        self.assertEqual(data["distribution"]["8-9"], 2)
        self.assertEqual(data["distribution"]["9-10"], 1)
        self.assertEqual(data["distribution"]["7-8"], 1)

    def test_summary(self):
        data = self.get("/v1/analytics/summary").json()["data"]
        self.assertEqual(data["trend"], "stable")
        self.assertEqual(data["graded_semester_count"], 2)
        self.assertEqual(data["current_streak"], 2)

    def test_goal_from_query(self):
        data = self.get("/v1/analytics/goal", target=9, program_semesters=4).json()["data"]
        self.assertEqual(data["remaining_semesters"], 2)
        self.assertEqual(data["estimated_remaining_credits"], 16)
        self.assertEqual(data["required_sgpa"], 10.0)
        self.assertEqual(data["status"], "achievable")
        self.assertFalse(data["achieved"])

    def test_goal_uses_stored_target(self):
        body = self.get("/v1/analytics/goal").json()
        self.assertIsNone(body["data"])
        self.assertEqual(body["message"], "No target CGPA set")

        self.client.put("/v1/users/me", json={"target_cgpa": 7.5}, headers=self.headers)
        data = self.get("/v1/analytics/goal").json()["data"]
        self.assertEqual(data["target_cgpa"], 7.5)
        self.assertTrue(data["achieved"])

    def test_goal_with_program_complete(self):
        data = self.get("/v1/analytics/goal", target=9, program_semesters=2).json()["data"]
        self.assertIsNone(data["required_sgpa"])
        self.assertEqual(data["status"], "no_remaining_capacity")

    def test_goal_for_new_user(self):
        headers = self.register("student2")
        self.client.put("/v1/users/me", json={"target_cgpa": 8}, headers=headers)

        data = self.client.get("/v1/analytics/goal", headers=headers).json()["data"]
        self.assertEqual(data["remaining_semesters"], 8)
        self.assertEqual(data["estimated_remaining_credits"], 160)
        self.assertEqual(data["required_sgpa"], 8.0)
        self.assertEqual(data["status"], "achievable")

    def test_goal_above_scale(self):
        self.assertEqual(self.get("/v1/analytics/goal", target=12).status_code, 400)

    def test_required_sgpa(self):
        data = self.get("/v1/analytics/required-sgpa", target=9, remaining_credits=16).json()["data"]
        self.assertEqual(data["required_sgpa"], 10.0)
        self.assertEqual(data["status"], "achievable")

        data = self.get("/v1/analytics/required-sgpa", target=9.5, remaining_credits=16).json()["data"]
        self.assertEqual(data["required_sgpa"], 11.0)
        self.assertEqual(data["status"], "unachievable")

        data = self.get("/v1/analytics/required-sgpa", target=6, remaining_credits=16).json()["data"]
        self.assertEqual(data["required_sgpa"], 4.0)

    def test_required_sgpa_without_remaining_credits(self):
        res = self.get("/v1/analytics/required-sgpa", target=9, remaining_credits=0)
        self.assertEqual(res.status_code, 422)
        self.assertEqual(res.json()["error"]["code"], "NO_REMAINING_CAPACITY")


class ExportApiTests(ApiTestCase):
    def test_csv_export(self):
        headers = self.register()
        semester = self.create_semester(headers, 1)["id"]
        self.create_subject(headers, semester, "Math", 4, grade="A")

        res = self.client.get("/v1/exports/csv", headers=headers)
        self.assertEqual(res.status_code, 200)
        self.assertTrue(res.headers["content-type"].startswith("text/csv"))
        self.assertIn("attachment; filename=academic_report_", res.headers["content-disposition"])

        rows = list(csv.reader(io.StringIO(res.text)))
        self.assertIn(["Student", "student1"], rows)
        self.assertIn(["Semester 1", "Math", "4", "A", "8", "8"], rows)

    def test_export_requires_login(self):
        self.assertEqual(self.client.get("/v1/exports/csv").status_code, 401)


if __name__ == "__main__":
    unittest.main()
