"""Canteen food eligibility endpoints."""
from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from festgate.api.deps import get_db, get_request_context, require_staff
from festgate.core.constants import DEFAULT_MEAL_TYPE
from festgate.core.context import RequestContext
from festgate.core.rate_limit import limiter, RATE_LIMITS
from festgate.schemas import EligibilityData, EligibilityRequest, EligibilityResponse, FoodScanRequest
from festgate.schemas.food import EligibleEvent, EligibleMember
from festgate.services.eligibility import (
    EligibilityResult,
    IneligibleReason,
    check_eligibility,
    record_food_scan,
)

router = APIRouter()

# Not being checked in is an answer, not a failed request
INELIGIBLE_STATUS_CODES = {
    IneligibleReason.INVALID_CANTEEN_TOKEN: 404,
    IneligibleReason.INVALID_MEMBER_TOKEN: 404,
    IneligibleReason.WRONG_EVENT: 400,
    IneligibleReason.EVENT_INACTIVE: 400,
    IneligibleReason.NOT_CHECKED_IN: 200,
}


def _to_response(result: EligibilityResult, response: Response, meal_type=None) -> EligibilityResponse:
    if not result.eligible:
        response.status_code = INELIGIBLE_STATUS_CODES[result.reason]

    member = None
    if result.member is not None:
        member = EligibleMember(
            id=result.member.id,
            name=result.member.name,
            email=result.member.email,
            team_name=result.team.team_name,
        )
    event = EligibleEvent(id=result.event.id, name=result.event.name) if result.event is not None else None

    return EligibilityResponse(
        success=result.eligible,
        eligible=result.eligible,
        reason=result.reason.value if result.reason else None,
        message=result.message,
        error=None if result.eligible else result.message,
        data=EligibilityData(
            member=member,
            event=event,
            check_in_time=result.check_in_time,
            meal_type=meal_type if result.eligible else None,
        ),
    )


@router.post("/check-eligibility", response_model=EligibilityResponse)
@limiter.limit(RATE_LIMITS["food_check"])
def check_eligibility_endpoint(
    request: Request,
    payload: EligibilityRequest,
    response: Response,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
):
    """
    Ask whether a member may eat at an event's canteen.

    The participant scans the canteen poster with their phone; the body
    carries that canteen token and their own member token. Eligibility
    depends only on having checked in at the gate of the same, active
    event. Asking is free: nothing about the member changes, each call only
    appends to the food log.

    Example:
        Request:
            POST /api/v1/food/check-eligibility
            {
                "eventCanteenQR": "EVENT:HACKFEST:CANTEEN:0b7e...",
                "memberQRToken": "HACKFEST_T12_M1_9f2c4a1b"
            }

        Response (200):
            {
                "success": true,
                "eligible": true,
                "reason": null,
                "message": "You are eligible for food!",
                "error": null,
                "data": {"member": {...}, "event": {...}, "checkInTime": "..."}
            }

        Response (200, not yet checked in):
            {"success": false, "eligible": false, "reason": "NOT_CHECKED_IN", ...}

        Response (404):
            {"success": false, "eligible": false, "reason": "INVALID_CANTEEN_TOKEN", ...}
    """
    result = check_eligibility(db, payload.event_canteen_qr, payload.member_qr_token, ctx)
    return _to_response(result, response)


@router.post("/scan", response_model=EligibilityResponse)
@limiter.limit(RATE_LIMITS["food_scan"])
def food_scan_endpoint(
    request: Request,
    payload: FoodScanRequest,
    response: Response,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_staff),
):
    """
    Counter-side scan by canteen staff (staff and above).

    Same decision as check-eligibility; the food log entry additionally
    records the meal type (default "general") and the scanning staff member,
    and eligible scans count towards the dashboard's food distributed total.
    """
    result = record_food_scan(
        db, payload.event_canteen_qr, payload.member_qr_token, ctx, meal_type=payload.meal_type
    )
    return _to_response(result, response, meal_type=payload.meal_type or DEFAULT_MEAL_TYPE)
