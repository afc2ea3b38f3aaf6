"""
Authentication gate and role checks.

``resolve_principal`` walks one request through the gate:

* no token                    -> 401 "Authentication required"
* token fails verification    -> 401 "Invalid or expired token"
* account no longer exists    -> 401 "User not found"
* account found               -> authenticated; the account is returned
  with its password hash stripped

``require_roles`` adds the second gate: an authenticated principal whose
role is not in the allowed set gets 403.
"""

import logging
from typing import Any, Callable, Dict, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..dependencies import get_account_store, get_settings
from ..stores.accounts import AccountStore, public_account
from .config import Settings
from .security import verify_access_token

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

Principal = Dict[str, Any]


def _unauthenticated(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def resolve_principal(
    token: Optional[str], accounts: AccountStore, *, secret: Optional[str] = None
) -> Principal:
    """Resolve a bearer token to the public view of its account."""
    if not token:
        raise _unauthenticated("Authentication required")
    claims = verify_access_token(token, secret=secret)
    if claims is None:
        raise _unauthenticated("Invalid or expired token")
    account = await accounts.get_by_id(claims.account_id)
    if account is None:
        logger.info("Token presented for unknown account %s", claims.account_id)
        raise _unauthenticated("User not found")
    return public_account(account)


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    accounts: AccountStore = Depends(get_account_store),
    settings: Settings = Depends(get_settings),
) -> Principal:
    """Dependency returning the authenticated account.

    The account id is also left on ``request.state`` so the activity
    logger can attribute the request once the response is sent.
    """
    token = credentials.credentials if credentials is not None else None
    principal = await resolve_principal(token, accounts, secret=settings.secret_key)
    request.state.user_id = principal["id"]
    return principal


def require_roles(*roles: str) -> Callable[..., Principal]:
    """Dependency factory allowing only principals with one of ``roles``.

    Use as ``Depends(require_roles("admin"))``.
    """

    def _role_dependency(current_user: Principal = Depends(get_current_user)) -> Principal:
        if current_user.get("role") not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Admin access required" if roles == ("admin",) else "Insufficient permissions",
            )
        return current_user

    return _role_dependency


require_admin = require_roles("admin")


def is_admin(principal: Principal) -> bool:
    return principal.get("role") == "admin"


def ensure_admin_or_self(principal: Principal, account_id: int) -> None:
    """Raise 403 unless the principal is an admin or the account itself."""
    if not is_admin(principal) and principal.get("id") != account_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
