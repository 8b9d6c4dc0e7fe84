from datetime import datetime, timezone

from sqlalchemy import Column, Integer, Float, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from database.db import Base


class User(Base):
    __tablename__ = "users"  # registered students

    id = Column(Integer, primary_key=True, index=True)                   # user ID (Primary Key)
    username = Column(String(30), nullable=False, unique=True)           # lower-cased username
    email = Column(String(255), nullable=False, unique=True)             # lower-cased email
    password_hash = Column(String(255), nullable=False)                  # pbkdf2 hash
    college_id = Column(Integer, ForeignKey("colleges.id"), nullable=True)
    target_cgpa = Column(Float, nullable=True)                           # goal tracker target
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    college = relationship("College")
    semesters = relationship(
        "Semester",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="Semester.semester_number",
    )
