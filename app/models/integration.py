from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint, JSON
from app.database import Base
from app.utils.time import utcnow

class Integration(Base):
    __tablename__ = "integrations"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    type = Column(String, nullable=False)  # google_calendar, todoist, gmail
    credentials = Column(JSON, nullable=False)
    sync_status = Column(String, nullable=False, default="inactive")  # inactive, active, error
    last_synced = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "type", name="uq_integration_user_type"),
    )
