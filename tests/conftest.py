import os

TEST_DB_FILE = "test_quiz_duedate.db"
TEST_DB_URL = f"sqlite:///./{TEST_DB_FILE}"

# point the app's own engine (used on startup) at the test database too
os.environ.setdefault("QUIZ_DUEDATE_DATABASE_URL", TEST_DB_URL)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from quiz_duedate.core.config import GRADE_METHOD_FIRST  # noqa: E402
from quiz_duedate.core.deps import get_db  # noqa: E402
from quiz_duedate.db.base import Base  # noqa: E402
from quiz_duedate.main import app  # noqa: E402
from quiz_duedate.models.group import Group, GroupMember  # noqa: E402
from quiz_duedate.models.policy import QuizDueDatePolicy  # noqa: E402
from quiz_duedate.models.quiz import Quiz  # noqa: E402
from quiz_duedate.services.events import EventContext  # noqa: E402
from quiz_duedate.services.observer import event_bus  # noqa: E402

DAY = 86400
DUE = 1_700_000_000
COURSE_ID = 1

# quizzes
QUIZ_PENALTY = 1  # 10% per day, no cap, highest grade
QUIZ_FIRST_ATTEMPT = 2  # 10% per day, cap 40%, first attempt grading
QUIZ_NO_POLICY = 3

# groups in COURSE_ID
GROUP_A = 1
GROUP_B = 2
GROUP_OTHER_COURSE = 3

# users
USER_AB = 10  # member of A and B
USER_A = 11
USER_NO_GROUPS = 12

engine = create_engine(
    TEST_DB_URL,
    connect_args={"check_same_thread": False},
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="session", autouse=True)
def setup_test_db():
    """Create a fresh schema once for the whole test session."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    engine.dispose()
    if os.path.exists(TEST_DB_FILE):
        os.remove(TEST_DB_FILE)


@pytest.fixture(autouse=True)
def seed_data():
    """Seed a clean minimal dataset for each test."""
    db = TestingSessionLocal()
    try:
        # Clear tables (child -> parent)
        for table in reversed(Base.metadata.sorted_tables):
            db.execute(table.delete())
        db.commit()

        db.add_all(
            [
                Quiz(id=QUIZ_PENALTY, course_id=COURSE_ID, name="Quiz 1", grade_max=10.0),
                Quiz(
                    id=QUIZ_FIRST_ATTEMPT,
                    course_id=COURSE_ID,
                    name="Quiz 2",
                    grade_max=10.0,
                    grade_method=GRADE_METHOD_FIRST,
                ),
                Quiz(id=QUIZ_NO_POLICY, course_id=COURSE_ID, name="Quiz 3", grade_max=10.0),
            ]
        )
        db.commit()

        db.add_all(
            [
                QuizDueDatePolicy(
                    quiz_id=QUIZ_PENALTY,
                    due_date=DUE,
                    penalty_enabled=True,
                    penalty_rate=10,
                ),
                QuizDueDatePolicy(
                    quiz_id=QUIZ_FIRST_ATTEMPT,
                    due_date=DUE,
                    penalty_enabled=True,
                    penalty_rate=10,
                    penalty_cap_enabled=True,
                    penalty_cap=40,
                ),
            ]
        )

        db.add_all(
            [
                Group(id=GROUP_A, course_id=COURSE_ID, name="Group A"),
                Group(id=GROUP_B, course_id=COURSE_ID, name="Group B"),
                Group(id=GROUP_OTHER_COURSE, course_id=COURSE_ID + 1, name="Elsewhere"),
            ]
        )
        db.commit()

        db.add_all(
            [
                GroupMember(group_id=GROUP_A, user_id=USER_AB),
                GroupMember(group_id=GROUP_B, user_id=USER_AB),
                GroupMember(group_id=GROUP_A, user_id=USER_A),
                GroupMember(group_id=GROUP_OTHER_COURSE, user_id=USER_NO_GROUPS),
            ]
        )
        db.commit()

        yield
    finally:
        db.close()


@pytest.fixture()
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture()
def ctx(db):
    return EventContext(db=db, bus=event_bus)


@pytest.fixture()
def client():
    """Test client that uses the test DB session via dependency override."""
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
