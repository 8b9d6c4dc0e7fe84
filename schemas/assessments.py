from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


# ✅ input: one component of a template
class ComponentCreate(BaseModel):
    name: str = Field(..., min_length=1)
    weightage: float = Field(..., ge=0, le=100)
    max_score: float = Field(..., gt=0)


class TemplateCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    components: List[ComponentCreate] = Field(..., min_length=1)


class TemplateUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    components: Optional[List[ComponentCreate]] = None


class SubjectAssessmentCreate(BaseModel):
    subject_id: int
    template_id: int


class ScoreCreate(BaseModel):
    subject_assessment_id: int
    component_id: int
    score_obtained: float = Field(..., ge=0)
    max_score: Optional[float] = Field(default=None, gt=0)   # defaults to the component max_score


# ✅ output
class Component(BaseModel):
    id: int
    name: str
    weightage: float
    max_score: float

    model_config = ConfigDict(from_attributes=True)


class Template(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    components: List[Component] = []

    model_config = ConfigDict(from_attributes=True)


class Score(BaseModel):
    id: int
    component_id: int
    score_obtained: float
    max_score: float

    model_config = ConfigDict(from_attributes=True)


class SubjectAssessment(BaseModel):
    id: int
    subject_id: int
    template_id: int
    predicted_percentage: Optional[float] = None
    predicted_grade: Optional[str] = None
    predicted_grade_point: Optional[float] = None
    template: Template
    scores: List[Score] = []

    model_config = ConfigDict(from_attributes=True)
