"""Repository for SchoolInvitation model operations."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app.models.school_invitation import SchoolInvitation
from app.models.invitation_status import InvitationStatus
from app.models.role import SchoolRole

logger = logging.getLogger(__name__)


class SchoolInvitationRepository:
    """Repository for SchoolInvitation operations, scoped by school"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id_and_school(
        self, invitation_id: int, school_id: int
    ) -> SchoolInvitation | None:
        """
        Get invitation by ID, scoped to a school.

        Returns None if the invitation doesn't exist or belongs to another
        school.
        """
        return (
            self.db.query(SchoolInvitation)
            .filter(
                SchoolInvitation.id == invitation_id,
                SchoolInvitation.school_id == school_id,
            )
            .first()
        )

    def get_by_school_and_email(self, school_id: int, email: str) -> SchoolInvitation | None:
        """Get the invitation identified by its (school_id, email) key"""
        return (
            self.db.query(SchoolInvitation)
            .filter(
                SchoolInvitation.school_id == school_id,
                SchoolInvitation.email == email,
            )
            .first()
        )

    def get_pending_for_school(self, school_id: int) -> list[SchoolInvitation]:
        """Get all pending invitations of a school"""
        return (
            self.db.query(SchoolInvitation)
            .filter(
                SchoolInvitation.school_id == school_id,
                SchoolInvitation.status == InvitationStatus.PENDING,
            )
            .order_by(SchoolInvitation.id)
            .all()
        )

    def get_pending_for_email(self, email: str) -> list[SchoolInvitation]:
        """Get pending invitations addressed to an email, across schools"""
        return (
            self.db.query(SchoolInvitation)
            .filter(
                SchoolInvitation.email == email,
                SchoolInvitation.status == InvitationStatus.PENDING,
            )
            .order_by(SchoolInvitation.id)
            .all()
        )

    def upsert(
        self,
        school_id: int,
        email: str,
        role: SchoolRole,
        invited_by: int,
        status: InvitationStatus,
        commit: bool = True,
    ) -> SchoolInvitation:
        """
        Insert or replace the invitation keyed by (school_id, email).

        An existing row keeps its ID and gets role, inviter and status
        overwritten. Must be the first write of its unit of work: when a
        concurrent request inserts the same key first, the session is
        rolled back and the winning row is updated instead.

        Args:
            school_id: School ID
            email: Lower-cased email address
            role: Role granted on acceptance
            invited_by: User ID of the inviting admin
            status: Resulting invitation status
            commit: Commit immediately, or only flush inside a larger unit of work

        Returns:
            The inserted or updated SchoolInvitation
        """
        invitation = self.get_by_school_and_email(school_id, email)
        if invitation is None:
            invitation = SchoolInvitation(
                school_id=school_id,
                email=email,
                role=role,
                invited_by=invited_by,
                status=status,
            )
            self.db.add(invitation)
            try:
                self.db.flush()
            except IntegrityError:
                self.db.rollback()
                logger.info(
                    "Invitation for %s in school %s inserted concurrently, updating it",
                    email,
                    school_id,
                )
                invitation = self.get_by_school_and_email(school_id, email)
                if invitation is None:
                    raise
                self._apply(invitation, role, invited_by, status)
        else:
            self._apply(invitation, role, invited_by, status)

        if commit:
            self.db.commit()
            self.db.refresh(invitation)
        else:
            self.db.flush()
        return invitation

    def mark_accepted(self, invitation: SchoolInvitation, commit: bool = True) -> SchoolInvitation:
        """Transition an invitation to ACCEPTED"""
        invitation.status = InvitationStatus.ACCEPTED
        if commit:
            self.db.commit()
            self.db.refresh(invitation)
        else:
            self.db.flush()
        return invitation

    def delete(self, invitation: SchoolInvitation) -> None:
        """Delete an invitation"""
        self.db.delete(invitation)
        self.db.commit()

    @staticmethod
    def _apply(
        invitation: SchoolInvitation,
        role: SchoolRole,
        invited_by: int,
        status: InvitationStatus,
    ) -> None:
        invitation.role = role
        invitation.invited_by = invited_by
        invitation.status = status
