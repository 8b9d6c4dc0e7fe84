from sqlalchemy import Column, Integer, Date, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from database.db import Base


class Semester(Base):
    __tablename__ = "semesters"  # one row per semester of a user
    __table_args__ = (UniqueConstraint("user_id", "semester_number", name="uq_semester_user_number"),)

    id = Column(Integer, primary_key=True, index=True)                               # semester ID (Primary Key)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    semester_number = Column(Integer, nullable=False)                                # 1, 2, 3 ...
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)

    user = relationship("User", back_populates="semesters")
    subjects = relationship(
        "Subject",
        back_populates="semester",
        cascade="all, delete-orphan",
        order_by="Subject.name",
    )
