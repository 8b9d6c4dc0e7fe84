from sqlalchemy import Column, Integer, Float, String, ForeignKey
from sqlalchemy.orm import relationship
from database.db import Base


class College(Base):
    __tablename__ = "colleges"  # college / university table

    id = Column(Integer, primary_key=True, index=True)                      # college ID (Primary Key)
    name = Column(String(200), nullable=False, unique=True)                 # college name
    grading_scale = Column(String(20), nullable=False, default="TEN_POINT") # TEN_POINT / FOUR_POINT

    grade_bands = relationship(
        "GradeBandRow",
        back_populates="college",
        cascade="all, delete-orphan",
        order_by="GradeBandRow.id",
    )


class GradeBandRow(Base):
    __tablename__ = "grade_bands"  # letter grade -> grade point mapping per college

    id = Column(Integer, primary_key=True, index=True)
    college_id = Column(Integer, ForeignKey("colleges.id", ondelete="CASCADE"), nullable=False)
    letter = Column(String(5), nullable=False)              # letter grade (e.g. O, A+, B)
    grade_point = Column(Float, nullable=False)             # grade point for the letter
    min_percentage = Column(Float, nullable=False)          # lowest percentage for this letter

    college = relationship("College", back_populates="grade_bands")
