"""Attendance ledger model."""
from datetime import datetime, timezone as tz
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Index

from festgate.db.base import Base


class AttendanceLog(Base):
    """One check-in scan attempt.

    Rows are append-only. Event, team, member and staff are referenced by
    plain identifiers (no foreign keys) and member name/email are
    snapshotted, so removing a member or team never rewrites history.
    """

    __tablename__ = "attendance_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    event_id = Column(Integer, nullable=True)
    team_id = Column(Integer, nullable=True)
    member_id = Column(Integer, nullable=True)
    team_name = Column(String(200), nullable=True)
    member_name = Column(String(200), nullable=False)
    member_email = Column(String(254), nullable=False)
    qr_token = Column(String(200), nullable=False)
    scanned_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(tz.utc))
    scanned_by = Column(Integer, nullable=True)
    scanned_by_name = Column(String(200), nullable=True)
    success = Column(Boolean, nullable=False, default=True)
    already_checked_in = Column(Boolean, nullable=False, default=False)
    reason = Column(String(40), nullable=True)
    error_message = Column(String(255), nullable=True)

    __table_args__ = (
        Index("idx_attendance_event_scanned", "event_id", "scanned_at"),
        Index("idx_attendance_team", "team_id"),
        Index("idx_attendance_token", "qr_token"),
        Index("idx_attendance_scanned_by", "scanned_by"),
    )
