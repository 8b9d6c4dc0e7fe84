import unittest

from api_case import ApiTestCase
from models.assessments import AssessmentComponent, AssessmentTemplate
from models.semesters import Semester
from models.subjects import Subject
from models.users import User


class AuthApiTests(ApiTestCase):
    def test_register_returns_user_and_token(self):
        res = self.client.post("/v1/auth/register", json={
            "username": "Alice",
            "email": "Alice@Example.com",
            "password": self.password,
            "college_id": self.college_id,
        })
        self.assertEqual(res.status_code, 201)
        body = res.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["data"]["user"]["username"], "alice")
        self.assertEqual(body["data"]["user"]["email"], "alice@example.com")
        self.assertNotIn("password_hash", body["data"]["user"])
        self.assertIn("session", res.cookies)

    def test_duplicate_email_and_username(self):
        self.register("alice")
        res = self.client.post("/v1/auth/register", json={
            "username": "other", "email": "alice@example.com",
            "password": self.password, "college_id": self.college_id,
        })
        self.assertEqual(res.status_code, 409)
        self.assertEqual(res.json()["error"]["field"], "email")

        res = self.client.post("/v1/auth/register", json={
            "username": "alice", "email": "new@example.com",
            "password": self.password, "college_id": self.college_id,
        })
        self.assertEqual(res.status_code, 409)
        self.assertEqual(res.json()["error"]["field"], "username")

    def test_weak_password_and_unknown_college(self):
        res = self.client.post("/v1/auth/register", json={
            "username": "bob", "email": "bob@example.com",
            "password": "password", "college_id": self.college_id,
        })
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.json()["error"]["code"], "VALIDATION_ERROR")

        res = self.client.post("/v1/auth/register", json={
            "username": "bob", "email": "bob@example.com",
            "password": self.password, "college_id": 999,
        })
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.json()["error"]["code"], "INVALID_COLLEGE")

    def test_login_with_username_or_email(self):
        self.register("carol")
        for identifier in ("carol", "CAROL@example.com"):
            res = self.client.post("/v1/auth/login", json={"identifier": identifier, "password": self.password})
            self.assertEqual(res.status_code, 200, res.text)
            self.assertTrue(res.json()["data"]["token"])

    def test_login_wrong_password(self):
        self.register("dave")
        res = self.client.post("/v1/auth/login", json={"identifier": "dave", "password": "Wrong#123"})
        self.assertEqual(res.status_code, 401)
        self.assertEqual(res.json()["error"]["code"], "UNAUTHORIZED")

    def test_session_cookie_authenticates(self):
        self.register("erin")
        self.client.post("/v1/auth/login", json={"identifier": "erin", "password": self.password})
        res = self.client.get("/v1/users/me")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json()["data"]["username"], "erin")

    def test_requires_authentication(self):
        self.assertEqual(self.client.get("/v1/users/me").status_code, 401)
        res = self.client.get("/v1/users/me", headers={"Authorization": "Bearer 1.2.bad"})
        self.assertEqual(res.status_code, 401)


class UserApiTests(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.headers = self.register()

    def test_profile_includes_college(self):
        data = self.client.get("/v1/users/me", headers=self.headers).json()["data"]
        self.assertEqual(data["college"]["id"], self.college_id)
        self.assertEqual(data["college"]["grading_scale"], "TEN_POINT")

    def test_target_cgpa_bounded_by_scale(self):
        res = self.client.put("/v1/users/me", json={"target_cgpa": 8.5}, headers=self.headers)
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json()["data"]["target_cgpa"], 8.5)

        res = self.client.put("/v1/users/me", json={"target_cgpa": 11}, headers=self.headers)
        self.assertEqual(res.status_code, 400)

    def test_switch_to_four_point_college(self):
        four = self.create_college("Four Point College", "FOUR_POINT")["id"]
        res = self.client.put("/v1/users/me", json={"college_id": four, "target_cgpa": 5}, headers=self.headers)
        self.assertEqual(res.status_code, 400)

        res = self.client.put("/v1/users/me", json={"college_id": four, "target_cgpa": 3.5}, headers=self.headers)
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json()["data"]["college_id"], four)

    def test_change_password(self):
        res = self.client.put("/v1/users/me/password", json={
            "current_password": "Wrong#123", "new_password": "Another#456",
        }, headers=self.headers)
        self.assertEqual(res.status_code, 401)

        res = self.client.put("/v1/users/me/password", json={
            "current_password": self.password, "new_password": "Another#456",
        }, headers=self.headers)
        self.assertEqual(res.status_code, 200)
        res = self.client.post("/v1/auth/login", json={"identifier": "student1", "password": "Another#456"})
        self.assertEqual(res.status_code, 200)


    def test_switching_to_narrower_scale_clears_target(self):
        self.client.put("/v1/users/me", json={"target_cgpa": 9}, headers=self.headers)
        four = self.create_college("Four Point College", "FOUR_POINT")["id"]

        res = self.client.put("/v1/users/me", json={"college_id": four}, headers=self.headers)
        self.assertEqual(res.status_code, 200)
        self.assertIsNone(res.json()["data"]["target_cgpa"])

        res = self.client.get("/v1/analytics/goal", headers=self.headers)
        self.assertEqual(res.status_code, 200)
        self.assertIsNone(res.json()["data"])

    def test_switching_college_keeps_target_within_scale(self):
        self.client.put("/v1/users/me", json={"target_cgpa": 3.5}, headers=self.headers)
        four = self.create_college("Four Point College", "FOUR_POINT")["id"]
        res = self.client.put("/v1/users/me", json={"college_id": four}, headers=self.headers)
        self.assertEqual(res.json()["data"]["target_cgpa"], 3.5)

    def test_delete_account_removes_academic_records(self):
        semester = self.create_semester(self.headers, 1)
        self.create_subject(self.headers, semester["id"], "Math", 4, grade_point=9)
        self.client.post("/v1/assessment-templates/", json={
            "name": "Theory", "components": [{"name": "End", "weightage": 100, "max_score": 100}],
        }, headers=self.headers)
        other = self.register("student2")
        self.create_semester(other, 1)

        res = self.client.delete("/v1/users/me", headers=self.headers)
        self.assertEqual(res.status_code, 200, res.text)
        self.assertEqual(self.client.get("/v1/users/me", headers=self.headers).status_code, 401)

        db = self.Session()
        try:
            self.assertEqual(db.query(User).count(), 1)
            self.assertEqual(db.query(Semester).count(), 1)
            self.assertEqual(db.query(Subject).count(), 0)
            self.assertEqual(db.query(AssessmentTemplate).count(), 0)
            self.assertEqual(db.query(AssessmentComponent).count(), 0)
        finally:
            db.close()

class CollegeApiTests(ApiTestCase):
    def test_list_and_grades(self):
        self.create_college("Another College", "FOUR_POINT")
        names = [c["name"] for c in self.client.get("/v1/colleges/").json()["data"]]
        self.assertEqual(names, ["Another College", "Test Institute of Technology"])

        data = self.client.get(f"/v1/colleges/{self.college_id}/grades").json()["data"]
        self.assertEqual(data["grades"][0]["letter"], "O")

    def test_duplicate_college(self):
        res = self.client.post("/v1/colleges/", json={"name": "Test Institute of Technology", "grading_scale": "TEN_POINT"})
        self.assertEqual(res.status_code, 409)

    def test_unknown_college(self):
        self.assertEqual(self.client.get("/v1/colleges/999/grades").status_code, 404)


if __name__ == "__main__":
    unittest.main()
