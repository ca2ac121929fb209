"""Member model."""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import relationship

from festgate.db.base import Base


class Member(Base):
    __tablename__ = "members"

    id = Column(Integer, primary_key=True, autoincrement=True)
    team_id = Column(Integer, ForeignKey("teams.id", ondelete="CASCADE"), nullable=False)
    position = Column(Integer, nullable=False, default=0)
    name = Column(String(200), nullable=False)
    email = Column(String(254), nullable=False)
    college = Column(String(200), nullable=False)
    roll_number = Column(String(50), nullable=False)
    qr_token = Column(String(200), unique=True, nullable=False, index=True)
    # Only mutated by the check-in compare-and-set
    is_checked_in = Column(Boolean, nullable=False, default=False)
    check_in_time = Column(DateTime(timezone=True), nullable=True)
    checked_in_by = Column(Integer, nullable=True)

    # Relationships
    team = relationship("Team", back_populates="members")

    __table_args__ = (
        Index("idx_members_team", "team_id"),
        Index("idx_members_email", "email"),
        UniqueConstraint("team_id", "email", name="uq_member_team_email"),
    )
