from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from app.database import get_db
from app.models.school_context import CallerIdentity
from app.services.identity_service import IdentityService

# auto_error=False so a missing header goes through UnauthorizedException (401)
security = HTTPBearer(auto_error=False)


async def get_current_caller(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
) -> CallerIdentity:
    """
    FastAPI dependency to validate JWT and get/register the caller.

    Flow:
    1. Extract token from Authorization: Bearer <token>
    2. Validate JWT using shared SECRET_KEY
    3. Get or auto-create User record (claims pending invitations)
    4. Return CallerIdentity, passed explicitly to services

    Raises:
        UnauthorizedException: If token missing, invalid or expired
    """
    token = credentials.credentials if credentials else None
    return IdentityService(db).verify_caller(token)
