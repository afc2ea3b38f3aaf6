"""
User endpoints for API v1.

Administrators list, create and delete accounts.  Reading, updating and
changing the password of an account is also open to the account owner;
only an administrator may change a role.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from admin_dashboard_api.app.core.auth import ensure_admin_or_self, get_current_user, is_admin, require_admin
from admin_dashboard_api.app.dependencies import get_user_service
from admin_dashboard_api.app.schemas.user import PasswordChange, UserCreate, UserUpdate
from admin_dashboard_api.app.services.user_service import UserService
from admin_dashboard_api.app.stores.accounts import AccountExists, public_account

router = APIRouter()


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")


@router.get("")
async def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: str = Query(""),
    role: Optional[str] = Query(None),
    user_status: Optional[str] = Query(None, alias="status"),
    sort_by: str = Query("createdAt", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder", pattern="^(asc|desc)$"),
    current_user: Dict[str, Any] = Depends(require_admin),
    users: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    """Return one page of accounts matching the search and filters."""
    result, _ = await users.list_users(
        page=page,
        limit=limit,
        search=search,
        role=role,
        status=user_status,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return {
        "success": True,
        "data": [public_account(u) for u in result.items],
        "pagination": result.pagination(),
    }


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_user(
    payload: UserCreate,
    current_user: Dict[str, Any] = Depends(require_admin),
    users: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    try:
        account = await users.create_user(payload.name, payload.email, payload.password, payload.role)
    except AccountExists:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User already exists")
    return {"success": True, "data": public_account(account)}


@router.get("/{user_id}")
async def get_user(
    user_id: int,
    current_user: Dict[str, Any] = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    ensure_admin_or_self(current_user, user_id)
    account = await users.accounts.get_by_id(user_id)
    if account is None:
        raise _not_found()
    return {"success": True, "data": public_account(account)}


@router.put("/{user_id}")
async def update_user(
    user_id: int,
    payload: UserUpdate,
    current_user: Dict[str, Any] = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    """Update profile fields of an account.

    Fields left out of the body, or sent as ``null``, keep their value.
    """
    ensure_admin_or_self(current_user, user_id)
    updates = {k: v for k, v in payload.changes().items() if v is not None}
    if "role" in updates and not is_admin(current_user):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only admin can change roles")
    try:
        account = await users.update_user(user_id, updates)
    except AccountExists:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User already exists")
    if account is None:
        raise _not_found()
    return {"success": True, "data": public_account(account)}


@router.delete("/{user_id}")
async def delete_user(
    user_id: int,
    current_user: Dict[str, Any] = Depends(require_admin),
    users: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    if current_user["id"] == user_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot delete your own account")
    if not await users.delete_user(user_id):
        raise _not_found()
    return {"success": True, "message": "User deleted successfully"}


@router.put("/{user_id}/password")
async def change_password(
    user_id: int,
    payload: PasswordChange,
    current_user: Dict[str, Any] = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    """Set a new password.

    Users changing their own password must confirm the current one; an
    administrator resetting someone else's password does not.
    """
    ensure_admin_or_self(current_user, user_id)
    account = await users.accounts.get_by_id(user_id)
    if account is None:
        raise _not_found()
    if current_user["id"] == user_id:
        if not await users.check_password(account, payload.current_password):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Current password is incorrect")
    await users.change_password(user_id, payload.new_password)
    return {"success": True, "message": "Password updated successfully"}
