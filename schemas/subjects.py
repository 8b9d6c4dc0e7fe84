from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _strip_name(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    v = v.strip()
    if not v:
        raise ValueError("Subject name is required")
    return v


# ✅ input: create
class SubjectCreate(BaseModel):
    semester_id: int
    name: str
    credits: float = Field(..., gt=0)
    grade: Optional[str] = None                          # letter grade, resolved through the college bands
    grade_point: Optional[float] = Field(default=None, ge=0)

    @field_validator("name")
    @classmethod
    def check_name(cls, v):
        return _strip_name(v)


# ✅ input: partial update
class SubjectUpdate(BaseModel):
    name: Optional[str] = None
    credits: Optional[float] = Field(default=None, gt=0)
    grade: Optional[str] = None
    grade_point: Optional[float] = Field(default=None, ge=0)

    @field_validator("name")
    @classmethod
    def check_name(cls, v):
        return _strip_name(v)


# ✅ output
class Subject(BaseModel):
    id: int
    semester_id: int
    name: str
    credits: float
    grade: Optional[str] = None
    grade_point: Optional[float] = None

    model_config = ConfigDict(from_attributes=True)
