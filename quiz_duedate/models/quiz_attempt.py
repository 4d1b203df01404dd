from sqlalchemy import Column, Float, ForeignKey, Integer
from sqlalchemy.orm import relationship

from quiz_duedate.db.base_class import Base


class QuizAttempt(Base):
    __tablename__ = "quiz_attempts"

    id = Column(Integer, primary_key=True, index=True)
    quiz_id = Column(Integer, ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, nullable=False, index=True)

    # epoch seconds, 0 while the attempt is in progress
    time_finish = Column(Integer, nullable=False, default=0)
    raw_grade = Column(Float, nullable=True)

    quiz = relationship("Quiz", back_populates="attempts")
