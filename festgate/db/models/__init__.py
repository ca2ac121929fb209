"""Database models."""
from festgate.db.models.user import User
from festgate.db.models.event import Event
from festgate.db.models.team import Team
from festgate.db.models.member import Member
from festgate.db.models.attendance_log import AttendanceLog
from festgate.db.models.food_log import FoodLog

__all__ = ["User", "Event", "Team", "Member", "AttendanceLog", "FoodLog"]
