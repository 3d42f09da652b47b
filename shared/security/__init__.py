from .context import Role, SessionContext, require_role
from .jwt_handler import create_access_token, verify_access_token
from .dependencies import authenticate, get_current_admin, get_current_user
from .rate_limiter import limiter, user_id_or_ip
from .locks import entity_locks, product_key, user_key

__all__ = [
    "Role",
    "SessionContext",
    "require_role",
    "create_access_token",
    "verify_access_token",
    "authenticate",
    "get_current_admin",
    "get_current_user",
    "limiter",
    "user_id_or_ip",
    "entity_locks",
    "product_key",
    "user_key",
]
