from datetime import date, datetime
from pydantic import BaseModel, EmailStr, Field, model_validator
from app.models.role import SchoolRole
from app.models.invitation_status import InvitationStatus


class SchoolCreate(BaseModel):
    """Create a school; the caller becomes its super admin"""

    name: str = Field(..., min_length=1, max_length=255)
    code: str = Field(..., min_length=1, max_length=50, description="Unique school code")
    location: str | None = Field(None, max_length=255)
    phone: str | None = Field(None, max_length=50)
    email: EmailStr | None = None
    academic_year_start: date | None = None
    academic_year_end: date | None = None

    @model_validator(mode="after")
    def check_academic_year(self):
        if (
            self.academic_year_start
            and self.academic_year_end
            and self.academic_year_end < self.academic_year_start
        ):
            raise ValueError("academic_year_end must not be before academic_year_start")
        return self


class SchoolResponse(BaseModel):
    """School details response"""

    id: int
    name: str
    code: str
    location: str | None
    phone: str | None
    email: str | None
    academic_year_start: date | None
    academic_year_end: date | None
    created_by: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class UserSchoolResponse(BaseModel):
    """School the caller belongs to, with the caller's role"""

    id: int
    name: str
    code: str
    role: SchoolRole
    created_at: datetime

    model_config = {"from_attributes": True}


class SchoolMemberResponse(BaseModel):
    """Member of a school with profile info"""

    id: int  # membership (user_role) ID
    user_id: int
    email: str | None
    full_name: str | None
    role: SchoolRole
    created_at: datetime


class SchoolInvitationResponse(BaseModel):
    """Invitation details"""

    id: int
    school_id: int
    email: str
    role: SchoolRole
    invited_by: int
    status: InvitationStatus
    created_at: datetime

    model_config = {"from_attributes": True}
