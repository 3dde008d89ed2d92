"""Authorization guard for school team management."""

import logging

from sqlalchemy.orm import Session

from app.core.exceptions import ForbiddenException
from app.models.role import SchoolRole
from app.models.school_context import CallerIdentity, SchoolContext
from app.repositories.school_membership_repository import SchoolMembershipRepository
from app.repositories.school_repository import SchoolRepository

logger = logging.getLogger(__name__)


class MembershipGuard:
    """Resolves a caller's role in a school and gates privileged operations"""

    def __init__(self, db: Session):
        self.db = db
        self.membership_repo = SchoolMembershipRepository(db)
        self.school_repo = SchoolRepository(db)

    def authorize(self, caller_id: int, school_id: int) -> SchoolRole | None:
        """
        Resolve the caller's team-management role in a school.

        Pure read. A None result means denied: the caller has no
        membership, or their role is TEACHER or VIEWER.

        Args:
            caller_id: Authenticated user ID
            school_id: Target school ID

        Returns:
            SUPER_ADMIN or ADMIN, or None when denied
        """
        membership = self.membership_repo.get_membership(caller_id, school_id)
        if membership is None or not membership.role.can_manage_team:
            return None
        return membership.role

    def require_manager(self, caller: CallerIdentity, school_id: int) -> SchoolContext:
        """
        Build the caller's SchoolContext, requiring admin or super_admin.

        Raises:
            ForbiddenException: If authorize() denies the caller
        """
        role = self.authorize(caller.user_id, school_id)
        if role is None:
            logger.warning(
                "Denied team management in school %s to user %s", school_id, caller.user_id
            )
            raise ForbiddenException("Only admins can manage team members")
        return SchoolContext(
            caller=caller, school=self.school_repo.get_by_id(school_id), role=role
        )

    def require_member(self, caller: CallerIdentity, school_id: int) -> SchoolContext:
        """
        Build the caller's SchoolContext for any role.

        Raises:
            ForbiddenException: If the caller does not belong to the school
        """
        membership = self.membership_repo.get_membership(caller.user_id, school_id)
        if membership is None:
            raise ForbiddenException("You are not a member of this school")
        return SchoolContext(caller=caller, school=membership.school, role=membership.role)
