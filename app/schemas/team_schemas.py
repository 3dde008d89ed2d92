from typing import Annotated, Literal, Union
from pydantic import BaseModel, Field, RootModel


# Email and role are validated by TeamService after the membership guard.


class InviteAction(BaseModel):
    """Invite an email into the school"""

    action: Literal["invite"]
    school_id: int
    email: str | None = None
    role: str | None = Field(None, description="admin, teacher or viewer")


class UpdateRoleAction(BaseModel):
    """Change the role of an existing member"""

    action: Literal["update_role"]
    school_id: int
    user_role_id: int = Field(..., description="Membership ID")
    role: str | None = None


class RemoveAction(BaseModel):
    """Remove a member from the school"""

    action: Literal["remove"]
    school_id: int
    user_role_id: int = Field(..., description="Membership ID")


class CancelInvitationAction(BaseModel):
    """Cancel a pending invitation"""

    action: Literal["cancel_invitation"]
    school_id: int
    invitation_id: int


TeamAction = Annotated[
    Union[InviteAction, UpdateRoleAction, RemoveAction, CancelInvitationAction],
    Field(discriminator="action"),
]


class TeamActionRequest(RootModel[TeamAction]):
    """Body of POST /api/manage-team, discriminated on 'action'"""


class TeamActionResponse(BaseModel):
    """Success payload; status is only set by invite"""

    message: str
    status: Literal["added", "pending"] | None = None
