import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import ConflictException
from app.models.role import SchoolRole
from app.models.school import School
from app.models.school_context import CallerIdentity
from app.models.school_invitation import SchoolInvitation
from app.models.school_membership import SchoolMembership
from app.repositories.school_invitation_repository import SchoolInvitationRepository
from app.repositories.school_membership_repository import SchoolMembershipRepository
from app.repositories.school_repository import SchoolRepository
from app.repositories.user_repository import UserRepository
from app.schemas.school_schemas import SchoolCreate
from app.services.membership_guard import MembershipGuard

logger = logging.getLogger(__name__)


class SchoolService:
    """Service layer for school creation and membership listings"""

    def __init__(self, db: Session):
        self.db = db
        self.guard = MembershipGuard(db)
        self.school_repo = SchoolRepository(db)
        self.membership_repo = SchoolMembershipRepository(db)
        self.invitation_repo = SchoolInvitationRepository(db)
        self.user_repo = UserRepository(db)

    def create_school(self, data: SchoolCreate, caller: CallerIdentity) -> School:
        """
        Create a school and make the caller its super admin.

        The school row and the SUPER_ADMIN membership are committed in one
        transaction; if either insert fails neither is kept.

        Raises:
            ConflictException: If the school code is already taken
        """
        if self.school_repo.get_by_code(data.code) is not None:
            raise ConflictException(f"School code {data.code} is already in use")

        school = School(
            name=data.name,
            code=data.code,
            location=data.location,
            phone=data.phone,
            email=data.email.lower() if data.email else None,
            academic_year_start=data.academic_year_start,
            academic_year_end=data.academic_year_end,
            created_by=caller.user_id,
        )
        try:
            self.school_repo.create(school, commit=False)
            self.membership_repo.create(
                SchoolMembership(
                    school_id=school.id,
                    user_id=caller.user_id,
                    role=SchoolRole.SUPER_ADMIN,
                ),
                commit=False,
            )
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictException(f"School code {data.code} is already in use")
        except SQLAlchemyError:
            self.db.rollback()
            raise

        self.db.refresh(school)
        logger.info(
            "School %s (%s) created by user %s", school.id, school.code, caller.user_id
        )
        return school

    def list_user_schools(self, caller: CallerIdentity) -> list[dict]:
        """
        List all schools the caller belongs to.

        Returns:
            List of schools with the caller's role in each
        """
        memberships = self.membership_repo.get_user_memberships(caller.user_id)
        schools = self.school_repo.get_by_ids([m.school_id for m in memberships])

        result = []
        for membership in memberships:
            school = schools.get(membership.school_id)
            if school:
                result.append(
                    {
                        "id": school.id,
                        "name": school.name,
                        "code": school.code,
                        "role": membership.role,
                        "created_at": school.created_at,
                    }
                )
        return result

    def get_members(self, caller: CallerIdentity, school_id: int) -> list[dict]:
        """
        Get all members of a school with profile details.

        Available to every member of the school.

        Raises:
            ForbiddenException: If the caller does not belong to the school
        """
        self.guard.require_member(caller, school_id)
        memberships = self.membership_repo.get_school_members(school_id)
        users = self.user_repo.get_by_ids([m.user_id for m in memberships])

        result = []
        for membership in memberships:
            user = users.get(membership.user_id)
            result.append(
                {
                    "id": membership.id,
                    "user_id": membership.user_id,
                    "email": user.email if user else None,
                    "full_name": user.full_name if user else None,
                    "role": membership.role,
                    "created_at": membership.created_at,
                }
            )
        return result

    def get_pending_invitations(
        self, caller: CallerIdentity, school_id: int
    ) -> list[SchoolInvitation]:
        """
        Get pending invitations of a school.

        Raises:
            ForbiddenException: If the caller does not belong to the school
        """
        self.guard.require_member(caller, school_id)
        return self.invitation_repo.get_pending_for_school(school_id)
