"""Team registration endpoints."""
from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from festgate.api.deps import get_db, get_request_context
from festgate.core.context import RequestContext
from festgate.core.qr import generate_qr_code
from festgate.schemas import AddMembersRequest, MemberQRResponse, TeamCreate, TeamResponse, TeamUpdate
from festgate.services import teams

router = APIRouter()


@router.post("", response_model=TeamResponse, status_code=201)
def create_team_endpoint(
    payload: TeamCreate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
):
    """
    Register a team with the caller as team lead.

    Every member gets a personal QR token (<SLUG>_T<teamId>_M<n>_<hex>) that
    is shown on their badge and scanned at the gate and the canteen.

    Raises:
        400 if the event is inactive or closed, full, or the member count is
            outside the event's team size bounds
        404 if the event does not exist
        409 if the caller already leads a team for this event or the team
            name is taken
    """
    members = [m.model_dump() for m in payload.members]
    return teams.create_team(
        db,
        ctx,
        event_id=payload.event_id,
        team_name=payload.team_name,
        members=members,
        lead_phone=payload.lead_phone,
    )


@router.get("/my", response_model=List[TeamResponse])
def my_teams_endpoint(
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
):
    """Teams led by the caller, newest first."""
    return teams.list_my_teams(db, ctx)


@router.get("/{team_id}", response_model=TeamResponse)
def get_team_endpoint(
    team_id: int,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
):
    return teams.get_team(db, team_id, ctx)


@router.patch("/{team_id}", response_model=TeamResponse)
def update_team_endpoint(
    team_id: int,
    payload: TeamUpdate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
):
    """Rename the team or change its contact phone; organizers may also set payment status."""
    return teams.update_team(db, team_id, ctx, **payload.model_dump(exclude_unset=True))


@router.patch("/{team_id}/members", response_model=TeamResponse)
def add_members_endpoint(
    team_id: int,
    payload: AddMembersRequest,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
):
    """Add members while registration is open, up to the event's maximum team size."""
    return teams.add_members(db, team_id, ctx, [m.model_dump() for m in payload.members])


@router.delete("/{team_id}/members/{member_id}", response_model=TeamResponse)
def remove_member_endpoint(
    team_id: int,
    member_id: int,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
):
    """
    Remove a member who has not checked in.

    The removed member's QR token stops resolving immediately.
    """
    return teams.remove_member(db, team_id, member_id, ctx)


@router.get("/{team_id}/members/{member_id}/qr", response_model=MemberQRResponse)
def member_qr_endpoint(
    team_id: int,
    member_id: int,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
):
    member = teams.get_member(db, team_id, member_id, ctx)
    svg = generate_qr_code(member.qr_token).getvalue().decode("utf-8")
    return MemberQRResponse(
        member_id=member.id,
        member_name=member.name,
        qr_token=member.qr_token,
        qr_svg=svg,
    )
