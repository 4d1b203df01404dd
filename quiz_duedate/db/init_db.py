from quiz_duedate.db.base import Base
from quiz_duedate.db.session import engine


def init_db() -> None:
    Base.metadata.create_all(bind=engine)
