"""Invitation of an email address into a school."""

from sqlalchemy import String, Integer, ForeignKey, Enum, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING

from app.models.base import Base, TimestampMixin
from app.models.role import SchoolRole
from app.models.invitation_status import InvitationStatus

if TYPE_CHECKING:
    from app.models.school import School


class SchoolInvitation(Base, TimestampMixin):
    """
    Invitation keyed by (school_id, email).

    The key is part of the invitation's identity: inviting the same email
    into the same school again replaces role, inviter and status of the
    existing row (see SchoolInvitationRepository.upsert).

    Lifecycle:
    - PENDING: email had no account at invite time
    - ACCEPTED: membership granted, either at invite time or when the
      invited email registered
    Cancelling a pending invitation deletes the row.
    """

    __tablename__ = "school_invitations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    school_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("schools.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    role: Mapped[SchoolRole] = mapped_column(
        Enum(SchoolRole, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=SchoolRole.TEACHER,
    )
    invited_by: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    status: Mapped[InvitationStatus] = mapped_column(
        Enum(InvitationStatus, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=InvitationStatus.PENDING,
        index=True,
    )

    # Relationships
    school: Mapped["School"] = relationship("School", back_populates="invitations")

    __table_args__ = (
        UniqueConstraint("school_id", "email", name="uq_school_invitation_email"),
    )

    def __repr__(self) -> str:
        return (
            f"<SchoolInvitation(school_id={self.school_id}, email='{self.email}', "
            f"role={self.role.value}, status={self.status.value})>"
        )
