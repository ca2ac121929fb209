"""Food ledger model."""
from datetime import datetime, timezone as tz
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Index

from festgate.db.base import Base


class FoodLog(Base):
    """One eligibility check or counter scan. Append-only, like AttendanceLog."""

    __tablename__ = "food_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    event_id = Column(Integer, nullable=True)
    team_id = Column(Integer, nullable=True)
    member_id = Column(Integer, nullable=True)
    team_name = Column(String(200), nullable=True)
    member_name = Column(String(200), nullable=False)
    member_email = Column(String(254), nullable=False)
    member_qr_token = Column(String(200), nullable=False)
    event_canteen_qr = Column(String(200), nullable=False)
    eligible = Column(Boolean, nullable=False)
    reason = Column(String(40), nullable=True)
    meal_type = Column(String(50), nullable=True)
    scanned_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(tz.utc))
    scanned_by = Column(Integer, nullable=True)
    scanned_by_name = Column(String(200), nullable=True)

    __table_args__ = (
        Index("idx_food_event_scanned", "event_id", "scanned_at"),
        Index("idx_food_team", "team_id"),
        Index("idx_food_token", "member_qr_token"),
        Index("idx_food_eligible", "eligible"),
    )
