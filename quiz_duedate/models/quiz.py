from sqlalchemy import Float, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from quiz_duedate.core.config import GRADE_METHOD_HIGHEST
from quiz_duedate.db.base_class import Base


class Quiz(Base):
    """Host quiz record. Only the columns the due date rules read."""

    __tablename__ = "quizzes"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    course_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    grade_method: Mapped[str] = mapped_column(
        String(20), nullable=False, default=GRADE_METHOD_HIGHEST
    )
    grade_max: Mapped[float] = mapped_column(Float, nullable=False, default=10.0)
    time_open: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    time_close: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    policy = relationship(
        "QuizDueDatePolicy", back_populates="quiz", uselist=False, cascade="all, delete-orphan"
    )
    attempts = relationship("QuizAttempt", back_populates="quiz", cascade="all, delete-orphan")
