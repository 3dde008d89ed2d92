"""Caller identity and school context for request authorization."""

from dataclasses import dataclass
from app.models.user import User
from app.models.school import School
from app.models.role import SchoolRole


@dataclass(frozen=True)
class CallerIdentity:
    """
    Authenticated caller, resolved from the bearer token.

    Passed explicitly into every service call; services never read
    request state themselves.

    Attributes:
        user: Local User row mirroring the identity provider account
        email: Lower-cased email claim of the token (may be None)
    """

    user: User
    email: str | None

    @property
    def user_id(self) -> int:
        return self.user.id


@dataclass
class SchoolContext:
    """
    Caller's verified standing within one school.

    Attributes:
        caller: The authenticated caller
        school: The School being accessed
        role: The caller's role within this school
    """

    caller: CallerIdentity
    school: School
    role: SchoolRole

    def __repr__(self) -> str:
        return (
            f"<SchoolContext(user_id={self.caller.user_id}, "
            f"school_id={self.school.id}, role={self.role.value})>"
        )
