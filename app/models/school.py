"""School model for multi-tenant isolation."""

from datetime import date
from sqlalchemy import String, Integer, Date, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING

from app.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from app.models.school_membership import SchoolMembership
    from app.models.school_invitation import SchoolInvitation


class School(Base, TimestampMixin):
    """
    Multi-tenant isolation boundary.

    A school is an isolated tenant: students, classes, trades, discipline
    entries, memberships and invitations all belong to exactly one school.
    Users reach school data only through a membership (user_roles row).

    The founding user (created_by) is granted SUPER_ADMIN in the same
    transaction that inserts the school.
    """

    __tablename__ = "schools"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    code: Mapped[str] = mapped_column(String(50), nullable=False, unique=True, index=True)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    academic_year_start: Mapped[date | None] = mapped_column(Date, nullable=True)
    academic_year_end: Mapped[date | None] = mapped_column(Date, nullable=True)
    created_by: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False, index=True
    )

    # Relationships
    memberships: Mapped[list["SchoolMembership"]] = relationship(
        "SchoolMembership",
        back_populates="school",
        cascade="all, delete-orphan",
    )
    invitations: Mapped[list["SchoolInvitation"]] = relationship(
        "SchoolInvitation",
        back_populates="school",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<School(id={self.id}, code='{self.code}', name='{self.name}')>"
