"""
Admin user management routes. Every route requires the admin role.
"""
from typing import List

from fastapi import APIRouter, Depends, status

from chef_site.deps import get_user_service, require_admin
from chef_site.schemas import MessageResponse, SessionUser, UserCreate, UserResponse, UserUpdate
from chef_site.services.users import UserService

router = APIRouter()


@router.get("/users", response_model=List[UserResponse])
async def list_users(
    users: UserService = Depends(get_user_service),
    admin: SessionUser = Depends(require_admin),
):
    return await users.list()


@router.get("/users/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str,
    users: UserService = Depends(get_user_service),
    admin: SessionUser = Depends(require_admin),
):
    return await users.get(user_id)


@router.post("/users", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    payload: UserCreate,
    users: UserService = Depends(get_user_service),
    admin: SessionUser = Depends(require_admin),
):
    """
    Create a user account. The password is stored as a bcrypt hash.

    Raises:
        Conflict: 409 if the email is already registered
    """
    return await users.create(payload)


@router.put("/users/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: str,
    payload: UserUpdate,
    users: UserService = Depends(get_user_service),
    admin: SessionUser = Depends(require_admin),
):
    return await users.update(user_id, payload)


@router.delete("/users/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: str,
    users: UserService = Depends(get_user_service),
    admin: SessionUser = Depends(require_admin),
):
    """
    Delete a user account.

    Raises:
        Conflict: 409 when deleting the signed-in account
    """
    await users.delete(user_id, acting_user_id=admin.id)
    return MessageResponse(message="User deleted successfully")
