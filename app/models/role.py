"""School role enum for role-based access control."""

from enum import Enum as PyEnum


class SchoolRole(str, PyEnum):
    """
    School membership roles.

    Role Hierarchy (highest to lowest):
    1. SUPER_ADMIN - Founder of the school, granted only at school creation
    2. ADMIN - Manage records, invite/promote/remove members
    3. TEACHER - Attendance and discipline records
    4. VIEWER - Read-only access

    SUPER_ADMIN is a protected role: it cannot be assigned, changed or
    removed through team management.
    """

    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    TEACHER = "teacher"
    VIEWER = "viewer"

    @property
    def is_protected(self) -> bool:
        return self is SchoolRole.SUPER_ADMIN

    @property
    def can_manage_team(self) -> bool:
        return self in (SchoolRole.SUPER_ADMIN, SchoolRole.ADMIN)


# Roles that team management may hand out
ASSIGNABLE_ROLES = (SchoolRole.ADMIN, SchoolRole.TEACHER, SchoolRole.VIEWER)
