from sqlalchemy import Column, Integer, Text, Date, DateTime, ForeignKey, UniqueConstraint, JSON
from app.database import Base
from app.utils.time import utcnow

class DailyPlan(Base):
    __tablename__ = "daily_plans"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    date = Column(Date, nullable=False)
    notes = Column(Text, nullable=True)
    task_ids = Column(JSON, nullable=False, default=list)        # ordered
    time_block_ids = Column(JSON, nullable=False, default=list)  # ordered
    created_at = Column(DateTime, default=utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_daily_plan_user_date"),
    )


class WeeklyPlan(Base):
    __tablename__ = "weekly_plans"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    goal_ids = Column(JSON, nullable=False, default=list)
    time_budgets = Column(JSON, nullable=False, default=dict)  # category -> minutes
    priority_areas = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "start_date", name="uq_weekly_plan_user_start"),
    )
