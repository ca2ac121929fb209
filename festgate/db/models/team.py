"""Team model."""
from datetime import datetime, timezone as tz
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Numeric, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import relationship

from festgate.db.base import Base


class Team(Base):
    __tablename__ = "teams"

    id = Column(Integer, primary_key=True, autoincrement=True)
    event_id = Column(Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False)
    team_name = Column(String(200), nullable=False)
    lead_user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    lead_email = Column(String(254), nullable=False)
    lead_name = Column(String(200), nullable=False)
    lead_phone = Column(String(20), nullable=True)
    total_amount = Column(Numeric(10, 2), nullable=False, default=0)
    payment_status = Column(String(20), nullable=False, default="pending")
    paid_at = Column(DateTime(timezone=True), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(tz.utc))

    # Relationships
    event = relationship("Event", back_populates="teams")
    members = relationship(
        "Member",
        back_populates="team",
        cascade="all, delete-orphan",
        order_by="Member.position",
    )

    __table_args__ = (
        Index("idx_teams_event", "event_id"),
        Index("idx_teams_lead", "lead_user_id"),
        UniqueConstraint("event_id", "lead_user_id", name="uq_team_event_lead"),
        UniqueConstraint("event_id", "team_name", name="uq_team_event_name"),
    )

    @property
    def member_count(self) -> int:
        return len(self.members)

    @property
    def checked_in_count(self) -> int:
        return sum(1 for member in self.members if member.is_checked_in)
