from enum import Enum as PyEnum


class InvitationStatus(str, PyEnum):
    """Invitation lifecycle status."""

    PENDING = "pending"  # Awaiting account registration
    ACCEPTED = "accepted"  # Membership granted
