from fastapi import Depends
from sqlalchemy.orm import Session

from quiz_duedate.db.session import SessionLocal
from quiz_duedate.services.events import EventContext
from quiz_duedate.services.guard import ReentrancyGuard
from quiz_duedate.services.observer import event_bus


# every request that needs DB will get a fresh session, and it will always close.
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# one guard per request so handler chains never leak across requests
def get_guard() -> ReentrancyGuard:
    return ReentrancyGuard()


def get_event_context(
    db: Session = Depends(get_db),
    guard: ReentrancyGuard = Depends(get_guard),
) -> EventContext:
    return EventContext(db=db, bus=event_bus, guard=guard)
