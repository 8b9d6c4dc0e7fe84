# ✅ import every model so Base.metadata knows all tables
from models.colleges import College, GradeBandRow
from models.users import User
from models.semesters import Semester
from models.subjects import Subject
from models.assessments import (
    AssessmentTemplate,
    AssessmentComponent,
    SubjectAssessment,
    AssessmentScore,
)
