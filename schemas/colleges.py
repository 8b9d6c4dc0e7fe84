from typing import Literal

from pydantic import BaseModel, ConfigDict, field_validator


# ✅ input
class CollegeCreate(BaseModel):
    name: str
    grading_scale: Literal["TEN_POINT", "FOUR_POINT"] = "TEN_POINT"

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("College name is required")
        return v


# ✅ output
class College(BaseModel):
    id: int
    name: str
    grading_scale: str

    model_config = ConfigDict(from_attributes=True)


class GradeBand(BaseModel):
    letter: str
    grade_point: float
    min_percentage: float

    model_config = ConfigDict(from_attributes=True)
