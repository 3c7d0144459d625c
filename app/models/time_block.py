from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, CheckConstraint
from app.database import Base
from app.utils.time import utcnow

class TimeBlock(Base):
    __tablename__ = "time_blocks"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String, nullable=False)
    task_id = Column(Integer, ForeignKey("tasks.id", ondelete="SET NULL"), nullable=True)
    start_time = Column(DateTime, nullable=False, index=True)
    end_time = Column(DateTime, nullable=False)
    buffer = Column(Integer, nullable=False, default=0)  # minutes
    calendar_event_id = Column(String, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint("end_time > start_time", name="ck_time_block_order"),
    )
