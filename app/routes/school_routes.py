from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_current_caller
from app.models.school_context import CallerIdentity
from app.services.school_service import SchoolService
from app.schemas.school_schemas import (
    SchoolCreate,
    SchoolResponse,
    UserSchoolResponse,
    SchoolMemberResponse,
    SchoolInvitationResponse,
)

router = APIRouter()


@router.post("", response_model=SchoolResponse, status_code=status.HTTP_201_CREATED)
async def create_school(
    data: SchoolCreate,
    caller: CallerIdentity = Depends(get_current_caller),
    db: Session = Depends(get_db),
):
    """
    Create a new school.

    The caller is granted SUPER_ADMIN in the same transaction.
    """
    service = SchoolService(db)
    return service.create_school(data, caller)


@router.get("", response_model=list[UserSchoolResponse])
async def list_user_schools(
    caller: CallerIdentity = Depends(get_current_caller),
    db: Session = Depends(get_db),
):
    """List all schools the caller belongs to, with the caller's role in each."""
    service = SchoolService(db)
    return service.list_user_schools(caller)


@router.get("/{school_id}/members", response_model=list[SchoolMemberResponse])
async def list_members(
    school_id: int,
    caller: CallerIdentity = Depends(get_current_caller),
    db: Session = Depends(get_db),
):
    """
    List all members of a school.

    Available to all members of the school.
    """
    service = SchoolService(db)
    return service.get_members(caller, school_id)


@router.get("/{school_id}/invitations", response_model=list[SchoolInvitationResponse])
async def list_pending_invitations(
    school_id: int,
    caller: CallerIdentity = Depends(get_current_caller),
    db: Session = Depends(get_db),
):
    """List pending invitations of a school."""
    service = SchoolService(db)
    return service.get_pending_invitations(caller, school_id)
