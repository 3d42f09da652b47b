from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from shared.errors import InvalidOrExpiredToken, MissingToken

from .context import Role, SessionContext, require_role
from .jwt_handler import verify_access_token

# Defines the expected header format (Bearer <token>)
bearer_scheme = HTTPBearer(auto_error=False)


def authenticate(token: str | None) -> SessionContext:
    """Turns a bearer token into the caller's SessionContext."""
    if not token:
        raise MissingToken()

    payload = verify_access_token(token)
    if payload is None:
        raise InvalidOrExpiredToken()

    try:
        return SessionContext(user_id=int(payload["sub"]), role=Role(payload["role"]))
    except (KeyError, TypeError, ValueError):
        raise InvalidOrExpiredToken()


async def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> SessionContext:
    """Dependency to validate the JWT and return the caller's SessionContext."""
    ctx = authenticate(credentials.credentials if credentials else None)
    # Store in request state for downstream use (like rate limiting)
    request.state.user_id = ctx.user_id
    return ctx


async def get_current_admin(ctx: SessionContext = Depends(get_current_user)) -> SessionContext:
    require_role(ctx, Role.ADMIN)
    return ctx
