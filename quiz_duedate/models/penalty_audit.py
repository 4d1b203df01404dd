from sqlalchemy import Column, ForeignKey, Integer, Numeric

from quiz_duedate.db.base_class import Base


class PenaltyAudit(Base):
    """Penalty percentage last applied to a graded attempt."""

    __tablename__ = "quizaccess_duedate_penalties"

    id = Column(Integer, primary_key=True, index=True)
    quiz_id = Column(Integer, ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False, index=True)
    attempt_id = Column(
        Integer, ForeignKey("quiz_attempts.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    penalty_applied = Column(Numeric(12, 2), nullable=False, default=0)
    last_modified = Column(Integer, nullable=False, default=0)
