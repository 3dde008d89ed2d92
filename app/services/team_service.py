import logging
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import (
    DuplicateMembershipException,
    NotFoundException,
    ProtectedRoleException,
)
from app.core.validators import normalize_email, require_assignable_role
from app.models.invitation_status import InvitationStatus
from app.models.role import SchoolRole
from app.models.school_context import CallerIdentity
from app.models.school_invitation import SchoolInvitation
from app.models.school_membership import SchoolMembership
from app.repositories.school_invitation_repository import SchoolInvitationRepository
from app.repositories.school_membership_repository import SchoolMembershipRepository
from app.services.identity_service import IdentityService
from app.services.membership_guard import MembershipGuard

logger = logging.getLogger(__name__)


@dataclass
class InviteResult:
    """Outcome of an invite: ACCEPTED when the email already had an account"""

    status: InvitationStatus
    invitation: SchoolInvitation
    membership: SchoolMembership | None = None


class TeamService:
    """
    Team management for a school: invite, change role, remove member,
    cancel invitation.

    Every operation first passes the MembershipGuard (admin or
    super_admin of the target school) and performs no mutation when
    denied. SUPER_ADMIN memberships are protected and never changed here.
    """

    def __init__(self, db: Session):
        self.db = db
        self.guard = MembershipGuard(db)
        self.identity = IdentityService(db)
        self.membership_repo = SchoolMembershipRepository(db)
        self.invitation_repo = SchoolInvitationRepository(db)

    def invite(
        self, caller: CallerIdentity, school_id: int, email: str | None, role: SchoolRole | str | None
    ) -> InviteResult:
        """
        Invite an email into the school.

        If the email already owns an account, the membership is created and
        the invitation recorded as ACCEPTED in one transaction. Otherwise a
        PENDING invitation is upserted; it is claimed when the email
        registers.

        Raises:
            ForbiddenException: If caller is not admin/super_admin
            ValidationException: If email or role is invalid
            DuplicateMembershipException: If the account is already a member
        """
        context = self.guard.require_manager(caller, school_id)
        email = normalize_email(email)
        role = require_assignable_role(role)

        account = self.identity.resolve_account_by_email(email)
        if account is None:
            invitation = self.invitation_repo.upsert(
                school_id, email, role, caller.user_id, InvitationStatus.PENDING
            )
            logger.info(
                "Pending invitation %s for %s as %s in school %s",
                invitation.id,
                email,
                role.value,
                context.school.id,
            )
            return InviteResult(status=InvitationStatus.PENDING, invitation=invitation)

        if self.membership_repo.get_membership(account.id, school_id) is not None:
            logger.warning("User %s already has a role in school %s", account.id, school_id)
            raise DuplicateMembershipException("User already has a role in this school")

        try:
            invitation = self.invitation_repo.upsert(
                school_id,
                email,
                role,
                caller.user_id,
                InvitationStatus.ACCEPTED,
                commit=False,
            )
            membership = self.membership_repo.create(
                SchoolMembership(school_id=school_id, user_id=account.id, role=role),
                commit=False,
            )
            self.db.commit()
        except IntegrityError:
            # uq_school_user: a concurrent invite added the member first
            self.db.rollback()
            raise DuplicateMembershipException("User already has a role in this school")
        except SQLAlchemyError:
            self.db.rollback()
            raise

        self.db.refresh(membership)
        self.db.refresh(invitation)
        logger.info(
            "Added user %s to school %s as %s", account.id, school_id, role.value
        )
        return InviteResult(
            status=InvitationStatus.ACCEPTED, invitation=invitation, membership=membership
        )

    def update_role(
        self,
        caller: CallerIdentity,
        school_id: int,
        membership_id: int,
        new_role: SchoolRole | str | None,
    ) -> SchoolMembership:
        """
        Change the role of a member.

        Raises:
            ForbiddenException: If caller is not admin/super_admin
            NotFoundException: If membership not found in this school
            ProtectedRoleException: If the member is super_admin
            ValidationException: If new_role is not assignable
        """
        self.guard.require_manager(caller, school_id)
        membership = self._get_membership(school_id, membership_id)

        if membership.role.is_protected:
            logger.warning("Refused role change of super_admin membership %s", membership.id)
            raise ProtectedRoleException("Cannot change a super admin's role")

        new_role = require_assignable_role(new_role)
        previous = membership.role
        membership = self.membership_repo.update_role(membership, new_role)
        logger.info(
            "Membership %s in school %s changed from %s to %s",
            membership.id,
            school_id,
            previous.value,
            new_role.value,
        )
        return membership

    def remove(self, caller: CallerIdentity, school_id: int, membership_id: int) -> None:
        """
        Remove a member from the school.

        Raises:
            ForbiddenException: If caller is not admin/super_admin
            NotFoundException: If membership not found in this school
            ProtectedRoleException: If the member is super_admin
        """
        self.guard.require_manager(caller, school_id)
        membership = self._get_membership(school_id, membership_id)

        if membership.role.is_protected:
            logger.warning("Refused removal of super_admin membership %s", membership.id)
            raise ProtectedRoleException("Cannot remove a super admin from the school")

        user_id = membership.user_id
        self.membership_repo.delete(membership)
        logger.info("Removed user %s from school %s", user_id, school_id)

    def cancel_invitation(
        self, caller: CallerIdentity, school_id: int, invitation_id: int
    ) -> bool:
        """
        Cancel a pending invitation.

        Accepted invitations are kept as a record of how the member joined;
        cancelling one changes nothing.

        Returns:
            True if a pending invitation was deleted, False for an accepted one

        Raises:
            ForbiddenException: If caller is not admin/super_admin
            NotFoundException: If invitation not found in this school
        """
        self.guard.require_manager(caller, school_id)
        invitation = self.invitation_repo.get_by_id_and_school(invitation_id, school_id)
        if invitation is None:
            raise NotFoundException("Invitation not found in this school")

        if invitation.status != InvitationStatus.PENDING:
            return False

        self.invitation_repo.delete(invitation)
        logger.info("Cancelled invitation %s in school %s", invitation_id, school_id)
        return True

    def _get_membership(self, school_id: int, membership_id: int) -> SchoolMembership:
        membership = self.membership_repo.get_by_id_and_school(membership_id, school_id)
        if membership is None:
            raise NotFoundException("Member not found in this school")
        return membership
