"""Team and member schemas."""
from datetime import datetime
from typing import List, Literal, Optional
from pydantic import Field, field_validator

from festgate.core.sanitization import normalize_email, sanitize_name, sanitize_text, validate_phone
from festgate.schemas.common import CamelModel
from festgate.schemas.event import EventSummary

PaymentStatus = Literal["pending", "completed", "failed"]


class MemberCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=200)
    email: str = Field(..., max_length=254)
    college: str = Field(..., min_length=1, max_length=200)
    roll_number: str = Field(..., min_length=1, max_length=50)

    @field_validator('name', 'college')
    @classmethod
    def sanitize_name_fields(cls, v: str) -> str:
        return sanitize_name(v)

    @field_validator('email')
    @classmethod
    def normalize_email_field(cls, v: str) -> str:
        return normalize_email(v)

    @field_validator('roll_number')
    @classmethod
    def sanitize_roll_number(cls, v: str) -> str:
        v = sanitize_text(v, max_length=50)
        if not v:
            raise ValueError("Roll number cannot be empty")
        return v


class TeamCreate(CamelModel):
    event_id: int
    team_name: str = Field(..., min_length=1, max_length=200)
    lead_phone: Optional[str] = None
    members: List[MemberCreate] = Field(..., min_length=1)

    @field_validator('team_name')
    @classmethod
    def sanitize_team_name(cls, v: str) -> str:
        return sanitize_name(v, field="Team name")

    @field_validator('lead_phone')
    @classmethod
    def validate_phone_field(cls, v: Optional[str]) -> Optional[str]:
        return validate_phone(v)


class TeamUpdate(CamelModel):
    team_name: Optional[str] = Field(None, min_length=1, max_length=200)
    lead_phone: Optional[str] = None
    payment_status: Optional[PaymentStatus] = None
    is_active: Optional[bool] = None

    @field_validator('team_name')
    @classmethod
    def sanitize_team_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return sanitize_name(v, field="Team name")

    @field_validator('lead_phone')
    @classmethod
    def validate_phone_field(cls, v: Optional[str]) -> Optional[str]:
        return validate_phone(v)


class AddMembersRequest(CamelModel):
    members: List[MemberCreate] = Field(..., min_length=1)


class MemberResponse(CamelModel):
    id: int
    position: int
    name: str
    email: str
    college: str
    roll_number: str
    qr_token: str
    is_checked_in: bool
    check_in_time: Optional[datetime] = None


class TeamResponse(CamelModel):
    id: int
    event_id: int
    event: EventSummary
    team_name: str
    lead_name: str
    lead_email: str
    lead_phone: Optional[str] = None
    total_amount: float
    payment_status: str
    paid_at: Optional[datetime] = None
    is_active: bool
    created_at: datetime
    member_count: int
    checked_in_count: int
    members: List[MemberResponse]


class TeamSummary(CamelModel):
    """Dashboard listing row."""
    id: int
    team_name: str
    lead_name: str
    lead_email: str
    lead_phone: Optional[str] = None
    total_amount: float
    payment_status: str
    is_active: bool
    created_at: datetime
    member_count: int
    checked_in_count: int


class MemberQRResponse(CamelModel):
    member_id: int
    member_name: str
    qr_token: str
    qr_svg: str
