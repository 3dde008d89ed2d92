"""Local adapter for the identity provider."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import ConflictException, UnauthorizedException
from app.core.security import extract_claims
from app.models.school_context import CallerIdentity
from app.models.school_membership import SchoolMembership
from app.models.user import User
from app.repositories.school_invitation_repository import SchoolInvitationRepository
from app.repositories.school_membership_repository import SchoolMembershipRepository
from app.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


class IdentityService:
    """
    Verifies callers and resolves accounts by email.

    The identity provider issues the JWTs; every account that has called
    the API is mirrored as a User row, which is what invite resolution
    looks at.
    """

    def __init__(self, db: Session):
        self.db = db
        self.user_repo = UserRepository(db)
        self.membership_repo = SchoolMembershipRepository(db)
        self.invitation_repo = SchoolInvitationRepository(db)

    def verify_caller(self, credential: str | None) -> CallerIdentity:
        """
        Turn a bearer credential into a CallerIdentity.

        Flow:
        1. Validate JWT using shared SECRET_KEY
        2. Extract sub/email/name claims
        3. Get or provision the User row (claiming pending invitations
           when an email is first seen for the account)

        Raises:
            UnauthorizedException: If credential missing, invalid or expired
        """
        if not credential:
            raise UnauthorizedException("Missing bearer token")

        auth_user_id, email, full_name = extract_claims(credential)
        user = self.get_or_provision(auth_user_id, email, full_name)
        return CallerIdentity(user=user, email=user.email)

    def resolve_account_by_email(self, email: str) -> User | None:
        """Return the account registered with this (lower-cased) email, if any"""
        return self.user_repo.get_by_email(email)

    def get_or_provision(
        self, auth_user_id: str, email: str | None, full_name: str | None = None
    ) -> User:
        """
        Get user by auth_user_id or register it.

        Registration and the claiming of pending invitations for the
        user's email are committed together.
        """
        user = self.user_repo.get_by_auth_id(auth_user_id)
        if user is not None:
            return self._refresh_profile(user, email, full_name)

        user = User(auth_user_id=auth_user_id, email=email, full_name=full_name)
        try:
            self.user_repo.create(user, commit=False)
            if email:
                self._claim_pending_invitations(user, email)
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            existing = self.user_repo.get_by_auth_id(auth_user_id)
            if existing is not None:
                # Registered by a concurrent request
                return existing
            raise ConflictException(f"Email {email} is registered to another account")

        self.db.refresh(user)
        logger.info("Registered user %s (%s)", user.id, email)
        return user

    def _claim_pending_invitations(self, user: User, email: str) -> int:
        claimed = 0
        for invitation in self.invitation_repo.get_pending_for_email(email):
            if self.membership_repo.get_membership(user.id, invitation.school_id) is None:
                membership = SchoolMembership(
                    school_id=invitation.school_id,
                    user_id=user.id,
                    role=invitation.role,
                )
                self.membership_repo.create(membership, commit=False)
            self.invitation_repo.mark_accepted(invitation, commit=False)
            logger.info(
                "User %s joined school %s as %s via invitation %s",
                user.id,
                invitation.school_id,
                invitation.role.value,
                invitation.id,
            )
            claimed += 1
        return claimed

    def _refresh_profile(self, user: User, email: str | None, full_name: str | None) -> User:
        """Store a changed email or name; a newly seen email claims its pending invitations"""
        changed = False
        new_email = bool(email) and user.email != email
        if new_email:
            user.email = email
            changed = True
        if full_name and user.full_name != full_name:
            user.full_name = full_name
            changed = True
        if not changed:
            return user
        try:
            if new_email:
                self.db.flush()
                self._claim_pending_invitations(user, email)
            return self.user_repo.update(user)
        except IntegrityError:
            self.db.rollback()
            raise ConflictException(f"Email {email} is registered to another account")
