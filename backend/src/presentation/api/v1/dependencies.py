"""
FastAPI Dependencies
Caller identity from the bearer token, dispatcher lookup
"""
from typing import Optional
from uuid import UUID

from fastapi import Depends, HTTPException, status, Header
from loguru import logger

from application.dispatcher import Dispatcher
from application.identity import CallerIdentity
from application.services.auth.interfaces import IJwtService
from .container import get_dispatcher, get_jwt_service


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_caller(
    authorization: Optional[str] = Header(None),
    jwt_service: IJwtService = Depends(get_jwt_service),
) -> CallerIdentity:
    """
    Resolve the caller once per request

    Usage:
        @router.get("/me")
        async def me(caller: CallerIdentity = Depends(get_caller)):
            ...

    No header means an anonymous caller; handlers decide whether that is enough.
    """
    if not authorization:
        return CallerIdentity.anonymous()

    # Extract token from "Bearer <token>"
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise _unauthorized("Invalid authorization header format")

    payload = jwt_service.verify_token(parts[1])
    if not payload:
        logger.warning("Rejected bearer token: invalid or expired")
        raise _unauthorized("Invalid or expired token")

    try:
        user_id = UUID(payload["sub"])
    except (KeyError, ValueError, TypeError):
        logger.warning("Rejected bearer token: malformed subject")
        raise _unauthorized("Invalid or expired token")

    return CallerIdentity.authenticated(user_id, payload.get("roles") or [])


def dispatcher_dependency() -> Dispatcher:
    return get_dispatcher()
