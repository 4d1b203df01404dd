from sqlalchemy import Boolean, Column, Float, ForeignKey, Integer, String, Text, UniqueConstraint

from quiz_duedate.db.base_class import Base


class Grade(Base):
    """Gradebook entry for one learner on one quiz."""

    __tablename__ = "grade_grades"

    id = Column(Integer, primary_key=True, index=True)
    quiz_id = Column(Integer, ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, nullable=False, index=True)

    raw_grade = Column(Float, nullable=True)
    final_grade = Column(Float, nullable=True)
    feedback = Column(Text, nullable=True)
    overridden = Column(Boolean, nullable=False, default=False)
    source = Column(String(100), nullable=True)
    last_modified = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        UniqueConstraint("quiz_id", "user_id", name="uq_grade_grades_quiz_user"),
    )
