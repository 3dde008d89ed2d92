from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.core.exceptions import ValidationException
from app.database import get_db
from app.dependencies import get_current_caller
from app.models.invitation_status import InvitationStatus
from app.models.school_context import CallerIdentity
from app.services.team_service import TeamService
from app.schemas.team_schemas import (
    CancelInvitationAction,
    InviteAction,
    RemoveAction,
    TeamActionRequest,
    TeamActionResponse,
    UpdateRoleAction,
)

router = APIRouter()


@router.options("", status_code=status.HTTP_200_OK)
async def manage_team_preflight():
    """Pre-flight without CORS headers: success, no payload."""
    return Response(status_code=status.HTTP_200_OK)


@router.post("", response_model=TeamActionResponse, response_model_exclude_none=True)
async def manage_team(
    body: TeamActionRequest,
    caller: CallerIdentity = Depends(get_current_caller),
    db: Session = Depends(get_db),
):
    """
    Team management RPC endpoint.

    - **Requires ADMIN or SUPER_ADMIN of `school_id`**
    - `invite`: adds an existing account directly (status `added`) or saves
      a pending invitation (status `pending`)
    - `update_role` / `remove`: super admin memberships are protected
    - `cancel_invitation`: deletes a pending invitation
    """
    service = TeamService(db)

    match body.root:
        case InviteAction(school_id=school_id, email=email, role=role):
            result = service.invite(caller, school_id, email, role)
            if result.status == InvitationStatus.ACCEPTED:
                return {"message": "User added to school", "status": "added"}
            return {
                "message": "Invitation saved. User will be added when they sign up.",
                "status": result.status.value,
            }

        case UpdateRoleAction(school_id=school_id, user_role_id=membership_id, role=role):
            service.update_role(caller, school_id, membership_id, role)
            return {"message": "Role updated"}

        case RemoveAction(school_id=school_id, user_role_id=membership_id):
            service.remove(caller, school_id, membership_id)
            return {"message": "Member removed"}

        case CancelInvitationAction(school_id=school_id, invitation_id=invitation_id):
            if service.cancel_invitation(caller, school_id, invitation_id):
                return {"message": "Invitation cancelled"}
            return {"message": "Invitation already accepted"}

        case _:
            raise ValidationException("Invalid action")
