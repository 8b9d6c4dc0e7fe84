from sqlalchemy import Column, Integer, Float, String, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from database.db import Base


class Subject(Base):
    __tablename__ = "subjects"  # subjects taken in a semester
    __table_args__ = (UniqueConstraint("semester_id", "name", name="uq_subject_semester_name"),)

    id = Column(Integer, primary_key=True, index=True)                                   # subject ID (Primary Key)
    semester_id = Column(Integer, ForeignKey("semesters.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(150), nullable=False)                                           # subject name
    credits = Column(Float, nullable=False)                                              # credit weight (> 0)
    grade = Column(String(5), nullable=True)                                             # letter grade (NULL = pending)
    grade_point = Column(Float, nullable=True)                                           # grade point (NULL = pending)

    semester = relationship("Semester", back_populates="subjects")
    assessment = relationship(
        "SubjectAssessment",
        back_populates="subject",
        uselist=False,
        cascade="all, delete-orphan",
    )
