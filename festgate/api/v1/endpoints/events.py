"""Event endpoints."""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from festgate.api.deps import get_db, get_request_context, require_organizer
from festgate.core.context import RequestContext
from festgate.core.qr import generate_qr_code
from festgate.schemas import CanteenQRResponse, EventCreate, EventResponse, EventUpdate
from festgate.services import events

router = APIRouter()


@router.get("", response_model=List[EventResponse])
def list_events_endpoint(
    active: Optional[bool] = Query(None, description="Only active (true) or inactive (false) events"),
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
):
    """List events, soonest first."""
    return events.list_events(db, active=active)


@router.post("", response_model=EventResponse, status_code=201)
def create_event_endpoint(
    payload: EventCreate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_organizer),
):
    """
    Create an event (organizer or admin).

    The event's canteen token is generated here, once, in the form
    EVENT:<SLUG>:CANTEEN:<uuid4>, and never changes afterwards.

    Raises:
        400 if the schedule or team size bounds are inconsistent
        409 if the slug is already used
    """
    return events.create_event(db, ctx, **payload.model_dump())


@router.get("/{event_id}", response_model=EventResponse)
def get_event_endpoint(
    event_id: int,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
):
    return events.get_event(db, event_id)


@router.patch("/{event_id}", response_model=EventResponse)
def update_event_endpoint(
    event_id: int,
    payload: EventUpdate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_organizer),
):
    """
    Partially update an event (organizer or admin).

    isActive and registrationOpen are independent: closing registration
    does not stop gate check-in, deactivating the event does.
    """
    return events.update_event(db, event_id, ctx, **payload.model_dump(exclude_unset=True))


@router.get("/{event_id}/canteen-qr", response_model=CanteenQRResponse)
def canteen_qr_endpoint(
    event_id: int,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_organizer),
):
    """Canteen token and its QR rendering (SVG) for printing at the food counter."""
    event = events.get_event(db, event_id)
    svg = generate_qr_code(event.canteen_token).getvalue().decode("utf-8")
    return CanteenQRResponse(
        event_id=event.id,
        event_name=event.name,
        canteen_token=event.canteen_token,
        qr_svg=svg,
    )
