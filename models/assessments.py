from datetime import datetime, timezone

from sqlalchemy import Column, Integer, Float, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from database.db import Base


class AssessmentTemplate(Base):
    __tablename__ = "assessment_templates"  # reusable evaluation scheme (e.g. "Theory 4 credit")

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(150), nullable=False)
    description = Column(String(500), nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    components = relationship(
        "AssessmentComponent",
        back_populates="template",
        cascade="all, delete-orphan",
        order_by="AssessmentComponent.id",
    )
    subject_assessments = relationship(
        "SubjectAssessment",
        back_populates="template",
        cascade="all, delete-orphan",
    )


class AssessmentComponent(Base):
    __tablename__ = "assessment_components"  # midterm, assignments, end-sem ...

    id = Column(Integer, primary_key=True, index=True)
    template_id = Column(Integer, ForeignKey("assessment_templates.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(100), nullable=False)
    weightage = Column(Float, nullable=False)      # percent of the final score
    max_score = Column(Float, nullable=False)      # raw maximum marks

    template = relationship("AssessmentTemplate", back_populates="components")
    scores = relationship("AssessmentScore", back_populates="component", cascade="all, delete-orphan")


class SubjectAssessment(Base):
    __tablename__ = "subject_assessments"  # links a subject to the template it is graded with

    id = Column(Integer, primary_key=True, index=True)
    subject_id = Column(Integer, ForeignKey("subjects.id", ondelete="CASCADE"), nullable=False, unique=True)
    template_id = Column(Integer, ForeignKey("assessment_templates.id", ondelete="CASCADE"), nullable=False)
    predicted_percentage = Column(Float, nullable=True)
    predicted_grade = Column(String(5), nullable=True)
    predicted_grade_point = Column(Float, nullable=True)

    subject = relationship("Subject", back_populates="assessment")
    template = relationship("AssessmentTemplate", back_populates="subject_assessments")
    scores = relationship(
        "AssessmentScore",
        back_populates="subject_assessment",
        cascade="all, delete-orphan",
    )


class AssessmentScore(Base):
    __tablename__ = "assessment_scores"  # marks obtained in one component
    __table_args__ = (
        UniqueConstraint("subject_assessment_id", "component_id", name="uq_score_assessment_component"),
    )

    id = Column(Integer, primary_key=True, index=True)
    subject_assessment_id = Column(
        Integer, ForeignKey("subject_assessments.id", ondelete="CASCADE"), nullable=False
    )
    component_id = Column(Integer, ForeignKey("assessment_components.id", ondelete="CASCADE"), nullable=False)
    score_obtained = Column(Float, nullable=False)
    max_score = Column(Float, nullable=False)

    subject_assessment = relationship("SubjectAssessment", back_populates="scores")
    component = relationship("AssessmentComponent", back_populates="scores")
