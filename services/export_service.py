"""
services/export_service.py

Builds the academic report (one dict, shared by the CSV and PDF exports) and the CSV file.
Values are rounded to 2 decimals here, at the output boundary.
"""

import csv
import io
from datetime import date
from typing import List

from models.semesters import Semester as SemesterModel
from models.users import User as UserModel
from services.academic_records import to_grade_group, to_grade_groups
from services.grade_aggregator import cumulative_cgpa, semester_sgpa


def _fmt(value) -> str:
    if value is None:
        return ""
    if isinstance(value, float):
        return f"{value:.2f}".rstrip("0").rstrip(".") if value != int(value) else str(int(value))
    return str(value)


def build_report(user: UserModel, semesters: List[SemesterModel]) -> dict:
    overall = cumulative_cgpa(to_grade_groups(semesters))

    rows = []
    for semester in semesters:
        result = semester_sgpa(to_grade_group(semester))
        rows.append({
            "name": f"Semester {semester.semester_number}",
            "sgpa": round(result.sgpa, 2) if result.graded_count else None,
            "credits": result.total_credits,
            "subjects": [
                {
                    "name": s.name,
                    "credits": s.credits,
                    "grade": s.grade,
                    "grade_point": s.grade_point,
                }
                for s in semester.subjects
            ],
        })

    return {
        "student": user.username,
        "email": user.email,
        "college": user.college.name if user.college else None,
        "cgpa": round(overall.cgpa, 2) if overall.total_credits else None,
        "semesters": rows,
        "total_semesters": len(semesters),
        "total_subjects": sum(len(s.subjects) for s in semesters),
        "total_credits": overall.total_credits,
        "generated_date": date.today().isoformat(),
    }


def report_to_csv(report: dict) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer)

    writer.writerow(["CGPA Tracker - Academic Report"])
    writer.writerow(["Student", report["student"]])
    writer.writerow(["Email", report["email"]])
    writer.writerow(["Overall CGPA", _fmt(report["cgpa"]) or "N/A"])
    writer.writerow(["Generated", report["generated_date"]])
    writer.writerow([])

    writer.writerow(["Semester", "Subject Name", "Credits", "Grade", "Grade Point", "SGPA"])
    for semester in report["semesters"]:
        sgpa = _fmt(semester["sgpa"]) or "N/A"
        if not semester["subjects"]:
            writer.writerow([semester["name"], "No subjects", "", "", "", sgpa])
            continue
        for idx, subject in enumerate(semester["subjects"]):
            writer.writerow([
                semester["name"],
                subject["name"],
                _fmt(subject["credits"]),
                subject["grade"] or "",
                _fmt(subject["grade_point"]),
                sgpa if idx == 0 else "",
            ])

    writer.writerow([])
    writer.writerow(["Summary"])
    writer.writerow(["Total Semesters", report["total_semesters"]])
    writer.writerow(["Total Subjects", report["total_subjects"]])
    writer.writerow(["Total Credits", _fmt(report["total_credits"])])
    writer.writerow(["Final CGPA", _fmt(report["cgpa"]) or "N/A"])
    return buffer.getvalue()
