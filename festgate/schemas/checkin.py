"""Check-in schemas."""
from datetime import datetime
from typing import Optional
from pydantic import Field, field_validator

from festgate.core.sanitization import MAX_SCAN_INPUT_LENGTH, normalize_qr_token
from festgate.schemas.common import CamelModel


class CheckInRequest(CamelModel):
    qr_token: str = Field(..., max_length=MAX_SCAN_INPUT_LENGTH)
    event_id: int

    @field_validator('qr_token')
    @classmethod
    def normalize_qr_token_field(cls, v: str) -> str:
        return normalize_qr_token(v)


class ScannedMember(CamelModel):
    id: int
    name: str
    email: str
    college: str
    roll_number: str


class ScannedTeam(CamelModel):
    id: int
    team_name: str


class CheckInData(CamelModel):
    member: ScannedMember
    team: ScannedTeam
    check_in_time: Optional[datetime] = None


class CheckInResponse(CamelModel):
    """
    Outcome of a gate scan.

    success is true for both a fresh check-in and a repeat scan;
    already_checked_in tells them apart. reason is set only on rejection.
    """
    success: bool
    already_checked_in: bool = False
    reason: Optional[str] = None
    message: str
    data: Optional[CheckInData] = None


class CheckInStatusData(CamelModel):
    is_checked_in: bool
    check_in_time: Optional[datetime] = None
    member_name: str
    team_name: str
    event_name: str


class CheckInStatusResponse(CamelModel):
    success: bool = True
    data: CheckInStatusData
