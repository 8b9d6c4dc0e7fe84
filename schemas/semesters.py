from datetime import date
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from schemas.subjects import Subject


# ✅ input: create
class SemesterCreate(BaseModel):
    semester_number: int = Field(..., ge=1, le=20)
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @model_validator(mode="after")
    def check_dates(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


# ✅ input: partial update
class SemesterUpdate(BaseModel):
    semester_number: Optional[int] = Field(default=None, ge=1, le=20)
    start_date: Optional[date] = None
    end_date: Optional[date] = None


# ✅ output
class Semester(BaseModel):
    id: int
    semester_number: int
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    subjects: List[Subject] = []

    model_config = ConfigDict(from_attributes=True)
