from sqlalchemy import Column, Integer, String, Text

from quiz_duedate.db.base_class import Base


class CalendarEvent(Base):
    __tablename__ = "calendar_events"

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(Integer, nullable=False, index=True)
    quiz_id = Column(Integer, nullable=False, index=True)

    # 0 for the quiz level event
    user_id = Column(Integer, nullable=False, default=0)
    group_id = Column(Integer, nullable=False, default=0)

    event_type = Column(String(20), nullable=False, default="due")
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    time_start = Column(Integer, nullable=False)
