"""Gate check-in endpoints."""
from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.orm import Session

from festgate.api.deps import get_db, get_request_context, require_staff
from festgate.core.context import RequestContext
from festgate.core.rate_limit import limiter, RATE_LIMITS
from festgate.core.sanitization import validate_qr_token
from festgate.schemas import CheckInData, CheckInRequest, CheckInResponse, CheckInStatusData, CheckInStatusResponse
from festgate.schemas.checkin import ScannedMember, ScannedTeam
from festgate.services.checkin import CheckInResult, RejectReason, check_in, get_check_in_status

router = APIRouter()

REJECT_STATUS_CODES = {
    RejectReason.TOKEN_NOT_FOUND: 404,
}


def _to_response(result: CheckInResult) -> CheckInResponse:
    data = None
    if result.member is not None:
        data = CheckInData(
            member=ScannedMember.model_validate(result.member),
            team=ScannedTeam.model_validate(result.team),
            check_in_time=result.member.check_in_time,
        )
    return CheckInResponse(
        success=result.success,
        already_checked_in=result.already_checked_in,
        reason=result.reason.value if result.reason else None,
        message=result.message,
        data=data,
    )


@router.post("/scan", response_model=CheckInResponse)
@limiter.limit(RATE_LIMITS["checkin_scan"])
def scan_endpoint(
    request: Request,
    payload: CheckInRequest,
    response: Response,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_staff),
):
    """
    Check a member in at an event's gate (staff and above).

    Scanning the same badge again is safe: the first scan returns success,
    every later scan (even one racing the first from another gate device)
    returns success with alreadyCheckedIn=true and does not change the
    recorded check-in time.

    Example:
        Request:
            POST /api/v1/checkin/scan
            {"qrToken": "HACKFEST_T12_M1_9f2c4a1b", "eventId": 3}

        Response (200):
            {
                "success": true,
                "alreadyCheckedIn": false,
                "reason": null,
                "message": "Member checked in successfully",
                "data": {
                    "member": {"id": 40, "name": "Asha", ...},
                    "team": {"id": 12, "teamName": "Byte Me"},
                    "checkInTime": "2025-03-14T09:12:44+00:00"
                }
            }

        Response (404):
            {"success": false, "reason": "TOKEN_NOT_FOUND", ...}

        Response (400):
            {"success": false, "reason": "EVENT_MISMATCH", ...}

    Rate Limit:
        300 requests per minute per IP

    Raises:
        503 if storage is unavailable; the scan may be retried
    """
    result = check_in(db, payload.qr_token, payload.event_id, ctx)
    if not result.success:
        response.status_code = REJECT_STATUS_CODES.get(result.reason, 400)
    return _to_response(result)


@router.get("/status/{qr_token}", response_model=CheckInStatusResponse)
@limiter.limit(RATE_LIMITS["checkin_status"])
def status_endpoint(
    request: Request,
    qr_token: str,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
):
    """Read-only check-in state of the member holding this token."""
    try:
        token = validate_qr_token(qr_token)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    status = get_check_in_status(db, token)
    return CheckInStatusResponse(data=CheckInStatusData(**status))
