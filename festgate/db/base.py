"""Database base class and model imports."""
from sqlalchemy.orm import declarative_base

Base = declarative_base()

# Import all models here for Alembic to detect them
from festgate.db.models.user import User  # noqa: F401, E402
from festgate.db.models.event import Event  # noqa: F401, E402
from festgate.db.models.team import Team  # noqa: F401, E402
from festgate.db.models.member import Member  # noqa: F401, E402
from festgate.db.models.attendance_log import AttendanceLog  # noqa: F401, E402
from festgate.db.models.food_log import FoodLog  # noqa: F401, E402
