from sqlalchemy import Boolean, Column, ForeignKey, Integer, Numeric
from sqlalchemy.orm import relationship

from quiz_duedate.db.base_class import Base


class QuizDueDatePolicy(Base):
    __tablename__ = "quizaccess_duedate_instances"

    id = Column(Integer, primary_key=True, index=True)
    quiz_id = Column(
        Integer, ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False, unique=True, index=True
    )

    # epoch seconds, 0 means no due date
    due_date = Column(Integer, nullable=False, default=0)

    penalty_enabled = Column(Boolean, nullable=False, default=False)
    penalty_rate = Column(Numeric(12, 2), nullable=False, default=0)
    penalty_cap_enabled = Column(Boolean, nullable=False, default=False)
    penalty_cap = Column(Numeric(12, 2), nullable=False, default=0)

    quiz = relationship("Quiz", back_populates="policy")
