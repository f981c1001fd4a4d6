"""
Caller identity.
Sessions are issued by the identity provider; every authenticated endpoint
only needs the caller's user id from the bearer token.
"""
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.core.exceptions import UnauthorizedError
from app.core.security import decode_token

security = HTTPBearer(auto_error=False)


async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> str:
    """Extract the user id (sub claim) from the JWT access token."""
    if not credentials or not credentials.credentials:
        raise UnauthorizedError("Not authenticated")

    payload = decode_token(credentials.credentials)
    if not payload:
        raise UnauthorizedError("Invalid or expired token")

    user_id = payload.get("sub")
    if not user_id:
        raise UnauthorizedError("Invalid token payload")

    return str(user_id)
