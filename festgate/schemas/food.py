"""Food eligibility schemas."""
from datetime import datetime
from typing import Optional
from pydantic import Field, field_validator

from festgate.core.sanitization import MAX_SCAN_INPUT_LENGTH, normalize_qr_token, sanitize_text
from festgate.schemas.common import CamelModel


class EligibilityRequest(CamelModel):
    event_canteen_qr: str = Field(..., alias="eventCanteenQR", max_length=MAX_SCAN_INPUT_LENGTH)
    member_qr_token: str = Field(..., alias="memberQRToken", max_length=MAX_SCAN_INPUT_LENGTH)

    @field_validator('event_canteen_qr', 'member_qr_token')
    @classmethod
    def normalize_tokens(cls, v: str) -> str:
        return normalize_qr_token(v)


class FoodScanRequest(EligibilityRequest):
    meal_type: Optional[str] = Field(None, max_length=50)

    @field_validator('meal_type')
    @classmethod
    def sanitize_meal_type(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return sanitize_text(v, max_length=50).lower() or None


class EligibleMember(CamelModel):
    id: int
    name: str
    email: str
    team_name: str


class EligibleEvent(CamelModel):
    id: int
    name: str


class EligibilityData(CamelModel):
    member: Optional[EligibleMember] = None
    event: Optional[EligibleEvent] = None
    check_in_time: Optional[datetime] = None
    meal_type: Optional[str] = None


class EligibilityResponse(CamelModel):
    success: bool = True
    eligible: bool
    reason: Optional[str] = None
    message: str
    error: Optional[str] = None
    data: Optional[EligibilityData] = None
