from typing import Optional
import logging
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.utils.security import decode_access_token
from app.utils.exceptions import UnauthorizedError, ForbiddenError
from app.services.auth_service import get_user_by_id

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def _extract_token(request: Request, credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    """Bearer header first, then the `token` cookie"""
    if credentials and credentials.credentials:
        return credentials.credentials
    return request.cookies.get("token")


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> dict:
    """Resolve the authenticated user from the JWT"""
    token = _extract_token(request, credentials)
    if not token:
        raise UnauthorizedError("Access denied. No token provided.")

    payload = decode_access_token(token)
    if payload is None:
        raise UnauthorizedError("Invalid token")

    user_id: str = payload.get("sub")
    if user_id is None:
        raise UnauthorizedError("Invalid token")

    user = await get_user_by_id(user_id)
    if not user:
        raise UnauthorizedError("Token is valid but user not found")

    if not user.get("is_active"):
        raise UnauthorizedError("User account is deactivated")

    return user


async def get_optional_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Optional[dict]:
    """Like get_current_user, but anonymous callers and bad tokens yield None"""
    token = _extract_token(request, credentials)
    if not token:
        return None

    payload = decode_access_token(token)
    if payload is None or payload.get("sub") is None:
        logger.debug("Ignoring invalid token on optional-auth route")
        return None

    user = await get_user_by_id(payload["sub"])
    if not user or not user.get("is_active"):
        return None

    return user


async def require_agent(user: dict = Depends(get_current_user)) -> dict:
    if not user.get("is_agent"):
        raise ForbiddenError("Access denied. Agent privileges required.")
    return user


async def require_agent_or_admin(user: dict = Depends(get_current_user)) -> dict:
    if not user.get("is_agent") and user.get("role") != "admin":
        raise ForbiddenError("Access denied. Agent privileges required.")
    return user


async def require_admin(user: dict = Depends(get_current_user)) -> dict:
    if user.get("role") != "admin":
        raise ForbiddenError(f"Access denied. Role '{user.get('role')}' is not authorized to access this resource.")
    return user


def is_owner_or_admin(user: Optional[dict], owner_id: str) -> bool:
    if not user:
        return False
    return user["id"] == owner_id or user.get("role") == "admin"
