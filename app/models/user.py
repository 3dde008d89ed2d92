from sqlalchemy import String, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING
from app.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from app.models.school_membership import SchoolMembership


class User(Base, TimestampMixin):
    """
    Mirrors accounts of the identity provider.

    Only stores the provider's user id (sub from JWT) plus the email and
    display name carried in the token - no credentials.
    Auto-created on first API request with a valid JWT; that first request
    is the point where pending invitations for the email are claimed.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    auth_user_id: Mapped[str] = mapped_column(
        String(255), unique=True, nullable=False, index=True
    )
    # Always stored lower case; used to resolve invitations to accounts
    email: Mapped[str | None] = mapped_column(
        String(255), unique=True, nullable=True, index=True
    )
    full_name: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Relationships
    memberships: Mapped[list["SchoolMembership"]] = relationship(
        "SchoolMembership",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, auth_user_id='{self.auth_user_id}')>"
