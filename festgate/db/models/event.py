"""Event model."""
from datetime import datetime, timezone as tz
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, Numeric, Index, CheckConstraint
from sqlalchemy.orm import relationship

from festgate.db.base import Base


class Event(Base):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    slug = Column(String(80), unique=True, nullable=False, index=True)
    description = Column(Text, nullable=False)
    type = Column(String(20), nullable=False, default="hackathon")
    start_date = Column(DateTime(timezone=True), nullable=False)
    end_date = Column(DateTime(timezone=True), nullable=False)
    venue = Column(String(200), nullable=False)
    registration_fee_per_member = Column(Numeric(10, 2), nullable=False, default=0)
    min_team_size = Column(Integer, nullable=False, default=1)
    max_team_size = Column(Integer, nullable=False, default=4)
    max_teams = Column(Integer, nullable=True)
    # Generated once at creation, stable for the event's life
    canteen_token = Column(String(200), unique=True, nullable=False, index=True)
    is_active = Column(Boolean, nullable=False, default=True)
    registration_open = Column(Boolean, nullable=False, default=True)
    created_by = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(tz.utc))

    # Relationships
    teams = relationship("Team", back_populates="event", cascade="all, delete-orphan")

    __table_args__ = (
        Index("idx_events_type_active", "type", "is_active"),
        CheckConstraint("min_team_size >= 1", name="ck_events_min_team_size"),
        CheckConstraint("max_team_size >= min_team_size", name="ck_events_team_size_bounds"),
        CheckConstraint("registration_fee_per_member >= 0", name="ck_events_fee_non_negative"),
    )
