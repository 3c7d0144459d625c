from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Boolean
from app.database import Base
from app.utils.time import utcnow

class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    estimated_duration = Column(Integer, nullable=True)  # minutes
    actual_duration = Column(Integer, nullable=True)     # minutes
    status = Column(String, nullable=False, default="todo")  # todo, in-progress, done
    goal_id = Column(Integer, ForeignKey("goals.id", ondelete="SET NULL"), nullable=True, index=True)
    priority = Column(String, nullable=False, default="medium")
    completed = Column(Boolean, nullable=False, default=False)  # mirrors status == "done"
    due_date = Column(DateTime, nullable=True)
    source = Column(String, nullable=False, default="manual")
    external_id = Column(String, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
