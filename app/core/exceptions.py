class SchoolRecordsException(Exception):
    """Base exception for the school records API"""

    code = "error"


class UnauthorizedException(SchoolRecordsException):
    """Raised when JWT validation fails or no credential was sent"""

    code = "unauthenticated"


class NotFoundException(SchoolRecordsException):
    """Raised when a membership or invitation is not found in the school"""

    code = "not_found"


class ForbiddenException(SchoolRecordsException):
    """Raised when the caller's role in the school does not allow the operation"""

    code = "forbidden"


class ValidationException(SchoolRecordsException):
    """Raised for business logic validation errors"""

    code = "validation_error"


class ConflictException(SchoolRecordsException):
    """Raised when a write collides with existing state"""

    code = "conflict"


class DuplicateMembershipException(ConflictException):
    """Raised when inviting an account that already belongs to the school"""

    code = "duplicate_membership"


class ProtectedRoleException(SchoolRecordsException):
    """Raised on attempts to change or remove a super_admin membership"""

    code = "protected_role"
