"""School membership model linking users to schools with roles."""

from sqlalchemy import Integer, ForeignKey, Enum, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING

from app.models.base import Base, TimestampMixin
from app.models.role import SchoolRole

if TYPE_CHECKING:
    from app.models.user import User
    from app.models.school import School


class SchoolMembership(Base, TimestampMixin):
    """
    Join table linking users to schools with roles (user_roles).

    - One user can belong to several schools
    - Each user has exactly one role per school

    Constraints:
    - Unique(school_id, user_id) - one membership per user per school
    - SUPER_ADMIN rows are never updated or deleted by team management
    """

    __tablename__ = "user_roles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    school_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("schools.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role: Mapped[SchoolRole] = mapped_column(
        Enum(SchoolRole, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=SchoolRole.VIEWER,
    )

    # Relationships
    school: Mapped["School"] = relationship("School", back_populates="memberships")
    user: Mapped["User"] = relationship("User", back_populates="memberships")

    __table_args__ = (
        UniqueConstraint("school_id", "user_id", name="uq_school_user"),
    )

    def __repr__(self) -> str:
        return f"<SchoolMembership(school_id={self.school_id}, user_id={self.user_id}, role={self.role.value})>"
