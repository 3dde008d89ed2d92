"""Repository for SchoolMembership model operations."""

from sqlalchemy.orm import Session
from app.models.school_membership import SchoolMembership
from app.models.role import SchoolRole


class SchoolMembershipRepository:
    """
    Repository for SchoolMembership (user_roles) operations.

    Every lookup takes the school ID so a membership of another school
    never matches.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_membership(self, user_id: int, school_id: int) -> SchoolMembership | None:
        """
        Get membership for a specific user in a specific school.

        Args:
            user_id: User ID
            school_id: School ID

        Returns:
            SchoolMembership object or None if not found
        """
        return (
            self.db.query(SchoolMembership)
            .filter(
                SchoolMembership.user_id == user_id,
                SchoolMembership.school_id == school_id,
            )
            .first()
        )

    def get_by_id_and_school(
        self, membership_id: int, school_id: int
    ) -> SchoolMembership | None:
        """
        Get membership by ID, scoped to a school.

        Returns None if the membership doesn't exist or belongs to another
        school.
        """
        return (
            self.db.query(SchoolMembership)
            .filter(
                SchoolMembership.id == membership_id,
                SchoolMembership.school_id == school_id,
            )
            .first()
        )

    def get_school_members(self, school_id: int) -> list[SchoolMembership]:
        """Get all memberships for a school"""
        return (
            self.db.query(SchoolMembership)
            .filter(SchoolMembership.school_id == school_id)
            .order_by(SchoolMembership.id)
            .all()
        )

    def get_user_memberships(self, user_id: int) -> list[SchoolMembership]:
        """Get all memberships for a user (all schools they belong to)"""
        return (
            self.db.query(SchoolMembership)
            .filter(SchoolMembership.user_id == user_id)
            .order_by(SchoolMembership.id)
            .all()
        )

    def create(self, membership: SchoolMembership, commit: bool = True) -> SchoolMembership:
        """
        Create a new school membership.

        Args:
            membership: SchoolMembership object to create
            commit: Commit immediately, or only flush inside a larger unit of work

        Returns:
            Created SchoolMembership object with ID populated

        Raises:
            IntegrityError: If (school_id, user_id) already exists
        """
        self.db.add(membership)
        if commit:
            self.db.commit()
            self.db.refresh(membership)
        else:
            self.db.flush()
        return membership

    def update_role(
        self, membership: SchoolMembership, new_role: SchoolRole
    ) -> SchoolMembership:
        """
        Update a member's role.

        Args:
            membership: SchoolMembership object to update
            new_role: New role to assign

        Returns:
            Updated SchoolMembership object
        """
        membership.role = new_role
        self.db.commit()
        self.db.refresh(membership)
        return membership

    def delete(self, membership: SchoolMembership) -> None:
        """
        Remove a user from a school.

        Args:
            membership: SchoolMembership object to delete
        """
        self.db.delete(membership)
        self.db.commit()

