"""
Authentication endpoints for API v1.

Login, self-service registration, the current-user lookup, token
refresh and logout.  Tokens are stateless, so logout only tells the
client to discard its token.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials

from admin_dashboard_api.app.core.auth import get_current_user, security
from admin_dashboard_api.app.core.config import Settings
from admin_dashboard_api.app.core.security import create_access_token, decode_access_token
from admin_dashboard_api.app.dependencies import get_account_store, get_settings, get_user_service
from admin_dashboard_api.app.schemas.user import LoginRequest, RegisterRequest
from admin_dashboard_api.app.services.user_service import UserService
from admin_dashboard_api.app.stores.accounts import AccountExists, AccountStore, public_account

logger = logging.getLogger(__name__)

router = APIRouter()


def _issue(account: Dict[str, Any], settings: Settings) -> str:
    return create_access_token(
        account["id"],
        account["role"],
        expires_delta=settings.access_token_expire_minutes * 60,
        secret=settings.secret_key,
    )


@router.post("/login")
async def login(
    credentials: LoginRequest,
    users: UserService = Depends(get_user_service),
    settings: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    """Authenticate with email and password and return a bearer token.

    Unknown email and wrong password share one message so the response
    does not reveal which accounts exist.
    """
    account = await users.authenticate(credentials.email, credentials.password)
    if account is None:
        logger.info("Failed login for %s", credentials.email)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    if account.get("status") != "active":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Account is not active")
    account = await users.record_login(account["id"]) or account
    return {
        "success": True,
        "token": _issue(account, settings),
        "user": public_account(account),
        "expiresIn": settings.access_token_expire_minutes * 60,
    }


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    payload: RegisterRequest,
    users: UserService = Depends(get_user_service),
    settings: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    """Create a ``user`` account and log it in."""
    try:
        account = await users.create_user(payload.name, payload.email, payload.password)
    except AccountExists:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User already exists")
    return {"success": True, "token": _issue(account, settings), "user": public_account(account)}


@router.get("/me")
async def me(current_user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
    """Return the authenticated account."""
    return current_user


@router.post("/refresh")
async def refresh(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    accounts: AccountStore = Depends(get_account_store),
    settings: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    """Exchange an authentic token for a fresh one.

    The presented token may already be expired; only its signature is
    checked.  The account must still exist and be active, and the new
    token carries the account's current role.
    """
    if credentials is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token required")
    payload = decode_access_token(credentials.credentials, secret=settings.secret_key)
    if payload is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    account = await accounts.get_by_id(payload["userId"])
    if account is None or account.get("status") != "active":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found or inactive")
    return {"success": True, "token": _issue(account, settings)}


@router.post("/logout")
async def logout(current_user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
    return {"success": True, "message": "Logged out successfully"}
