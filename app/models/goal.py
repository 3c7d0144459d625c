from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Boolean
from app.database import Base
from app.utils.time import utcnow

class Goal(Base):
    __tablename__ = "goals"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String, nullable=False)
    timeframe = Column(String, nullable=False)  # long-term, monthly, weekly, daily
    progress = Column(Integer, nullable=False, default=0)  # 0–100
    deadline = Column(DateTime, nullable=True)
    priority = Column(String, nullable=False, default="medium")  # low, medium, high
    parent_goal_id = Column(Integer, ForeignKey("goals.id", ondelete="SET NULL"), nullable=True)
    completed = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
