from sqlalchemy import CheckConstraint, Column, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship

from quiz_duedate.db.base_class import Base


class Override(Base):
    __tablename__ = "quizaccess_duedate_overrides"

    id = Column(Integer, primary_key=True, index=True)
    quiz_id = Column(Integer, ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False, index=True)

    # exactly one of user_id / group_id is set
    user_id = Column(Integer, nullable=True, index=True)
    group_id = Column(Integer, ForeignKey("groups.id", ondelete="CASCADE"), nullable=True, index=True)

    due_date = Column(Integer, nullable=False)
    last_modified = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        UniqueConstraint("quiz_id", "user_id", name="uq_duedate_override_quiz_user"),
        UniqueConstraint("quiz_id", "group_id", name="uq_duedate_override_quiz_group"),
        CheckConstraint(
            "(user_id IS NULL) <> (group_id IS NULL)",
            name="ck_duedate_override_single_scope",
        ),
    )

    quiz = relationship("Quiz")
    group = relationship("Group")
