"""Event schemas."""
from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional
from pydantic import Field, field_validator

from festgate.core.sanitization import sanitize_name, sanitize_slug, sanitize_text
from festgate.schemas.common import CamelModel

EventType = Literal["hackathon", "sports", "cultural", "technical", "food"]


class EventCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=200)
    slug: str = Field(..., min_length=1, max_length=80)
    description: str = Field(..., min_length=1, max_length=5000)
    type: EventType = "hackathon"
    start_date: datetime
    end_date: datetime
    venue: str = Field(..., min_length=1, max_length=200)
    registration_fee_per_member: Decimal = Field(Decimal("0"), ge=0)
    min_team_size: int = Field(1, ge=1)
    max_team_size: int = Field(4, ge=1)
    max_teams: Optional[int] = Field(None, ge=1)
    is_active: bool = True
    registration_open: bool = True

    @field_validator('name', 'venue')
    @classmethod
    def sanitize_name_fields(cls, v: str) -> str:
        return sanitize_name(v)

    @field_validator('slug')
    @classmethod
    def sanitize_slug_field(cls, v: str) -> str:
        return sanitize_slug(v)

    @field_validator('description')
    @classmethod
    def sanitize_description(cls, v: str) -> str:
        return sanitize_text(v, max_length=5000)


class EventUpdate(CamelModel):
    """Partial update; slug and canteen token cannot change."""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=5000)
    type: Optional[EventType] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    venue: Optional[str] = Field(None, min_length=1, max_length=200)
    registration_fee_per_member: Optional[Decimal] = Field(None, ge=0)
    min_team_size: Optional[int] = Field(None, ge=1)
    max_team_size: Optional[int] = Field(None, ge=1)
    max_teams: Optional[int] = Field(None, ge=1)
    is_active: Optional[bool] = None
    registration_open: Optional[bool] = None

    @field_validator('name', 'venue')
    @classmethod
    def sanitize_name_fields(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return sanitize_name(v)

    @field_validator('description')
    @classmethod
    def sanitize_description(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return sanitize_text(v, max_length=5000)


class EventResponse(CamelModel):
    id: int
    name: str
    slug: str
    description: str
    type: str
    start_date: datetime
    end_date: datetime
    venue: str
    registration_fee_per_member: float
    min_team_size: int
    max_team_size: int
    max_teams: Optional[int] = None
    is_active: bool
    registration_open: bool
    created_at: datetime


class EventSummary(CamelModel):
    id: int
    name: str
    slug: str


class CanteenQRResponse(CamelModel):
    event_id: int
    event_name: str
    canteen_token: str
    qr_svg: str
