import pytest
from app.core.exceptions import (
    DuplicateMembershipException,
    ForbiddenException,
    NotFoundException,
    ProtectedRoleException,
    ValidationException,
)
from app.models.invitation_status import InvitationStatus
from app.models.role import SchoolRole
from app.models.school_invitation import SchoolInvitation
from app.models.school_membership import SchoolMembership
from app.repositories.school_invitation_repository import SchoolInvitationRepository
from app.services.team_service import TeamService


class TestInvitationUpsert:
    """Invitations are keyed by (school_id, email)"""

    def test_upsert_inserts_then_replaces(self, db_session, school, founder, admin_user):
        repo = SchoolInvitationRepository(db_session)

        first = repo.upsert(school.id, "a@x.com", SchoolRole.TEACHER, founder.id, InvitationStatus.PENDING)
        second = repo.upsert(school.id, "a@x.com", SchoolRole.ADMIN, admin_user.id, InvitationStatus.PENDING)

        assert second.id == first.id
        assert second.role == SchoolRole.ADMIN
        assert second.invited_by == admin_user.id
        assert db_session.query(SchoolInvitation).count() == 1

    def test_upsert_can_accept_pending(self, db_session, school, founder):
        repo = SchoolInvitationRepository(db_session)
        repo.upsert(school.id, "a@x.com", SchoolRole.VIEWER, founder.id, InvitationStatus.PENDING)

        accepted = repo.upsert(school.id, "a@x.com", SchoolRole.VIEWER, founder.id, InvitationStatus.ACCEPTED)

        assert accepted.status == InvitationStatus.ACCEPTED
        assert repo.get_pending_for_school(school.id) == []


class TestTeamService:
    def test_invite_pending_result(self, db_session, school, admin_caller):
        result = TeamService(db_session).invite(admin_caller, school.id, "  New@X.com ", "teacher")

        assert result.status == InvitationStatus.PENDING
        assert result.membership is None
        assert result.invitation.email == "new@x.com"

    def test_invite_added_result(self, db_session, school, admin_caller, existing_user):
        result = TeamService(db_session).invite(admin_caller, school.id, "existing@x.com", SchoolRole.VIEWER)

        assert result.status == InvitationStatus.ACCEPTED
        assert result.membership.user_id == existing_user.id
        assert result.membership.role == SchoolRole.VIEWER

    def test_invite_twice_never_duplicates_membership(self, db_session, school, admin_caller, existing_user):
        service = TeamService(db_session)
        service.invite(admin_caller, school.id, "existing@x.com", "teacher")

        with pytest.raises(DuplicateMembershipException):
            service.invite(admin_caller, school.id, "existing@x.com", "teacher")

        count = (
            db_session.query(SchoolMembership)
            .filter_by(school_id=school.id, user_id=existing_user.id)
            .count()
        )
        assert count == 1

    @pytest.mark.parametrize("email", [None, "", "nobody", "a@"])
    def test_invite_rejects_invalid_email(self, db_session, school, admin_caller, email):
        with pytest.raises(ValidationException):
            TeamService(db_session).invite(admin_caller, school.id, email, "teacher")

    @pytest.mark.parametrize("role", [None, "super_admin", "principal"])
    def test_invite_rejects_unassignable_role(self, db_session, school, admin_caller, role):
        with pytest.raises(ValidationException):
            TeamService(db_session).invite(admin_caller, school.id, "new@x.com", role)

        assert db_session.query(SchoolInvitation).count() == 0

    def test_denied_before_validation(self, db_session, school, teacher_caller):
        """The guard runs before any input checks"""
        with pytest.raises(ForbiddenException):
            TeamService(db_session).invite(teacher_caller, school.id, "not-an-email", "super_admin")

    def test_update_role_protected(self, db_session, school, admin_caller, super_admin_membership):
        with pytest.raises(ProtectedRoleException):
            TeamService(db_session).update_role(
                admin_caller, school.id, super_admin_membership.id, SchoolRole.ADMIN
            )

        db_session.refresh(super_admin_membership)
        assert super_admin_membership.role == SchoolRole.SUPER_ADMIN

    def test_remove_protected(self, db_session, school, admin_caller, super_admin_membership):
        with pytest.raises(ProtectedRoleException):
            TeamService(db_session).remove(admin_caller, school.id, super_admin_membership.id)

        assert db_session.get(SchoolMembership, super_admin_membership.id) is not None

    def test_admin_can_demote_admin(self, db_session, school, admin_caller, existing_user):
        other_admin = SchoolMembership(school_id=school.id, user_id=existing_user.id, role=SchoolRole.ADMIN)
        db_session.add(other_admin)
        db_session.commit()

        updated = TeamService(db_session).update_role(admin_caller, school.id, other_admin.id, "viewer")

        assert updated.role == SchoolRole.VIEWER

    def test_cancel_unknown_invitation(self, db_session, school, admin_caller):
        with pytest.raises(NotFoundException):
            TeamService(db_session).cancel_invitation(admin_caller, school.id, 12345)

    def test_cancel_returns_whether_deleted(self, db_session, school, admin_caller, existing_user):
        service = TeamService(db_session)
        pending = service.invite(admin_caller, school.id, "new@x.com", "teacher").invitation
        accepted = service.invite(admin_caller, school.id, "existing@x.com", "teacher").invitation

        assert service.cancel_invitation(admin_caller, school.id, pending.id) is True
        assert service.cancel_invitation(admin_caller, school.id, accepted.id) is False
        assert db_session.query(SchoolInvitation).count() == 1
