"""
User API routes — register, login and CRUD.

Route prefix: ``/users`` (under ``config.api_prefix``).
Every route except register and login runs ``get_current_user`` first.
"""

from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, status

from api.schemas import (
    LoginRequest,
    MessageResponse,
    TokenResponse,
    UserCreate,
    UserResponse,
    UserUpdate,
)
from auth.dependencies import get_auth_service, get_current_user, get_directory
from database.models import User
from services.auth_service import AuthService
from services.directory import UserDirectory

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    req: UserCreate,
    directory: UserDirectory = Depends(get_directory),
) -> User:
    """Register a new user."""
    return await directory.register(req.email, req.password)


@router.post("/login", response_model=TokenResponse)
async def login(
    req: LoginRequest,
    auth: AuthService = Depends(get_auth_service),
) -> TokenResponse:
    """Exchange email + password for a bearer token."""
    token = await auth.login(req.email, req.password)
    return TokenResponse(token=token, expires_in=auth.token_ttl)


@router.get("", response_model=List[UserResponse])
async def list_users(
    directory: UserDirectory = Depends(get_directory),
    _caller: User = Depends(get_current_user),
) -> List[User]:
    return await directory.list_all()


@router.get("/me", response_model=UserResponse)
async def read_me(caller: User = Depends(get_current_user)) -> User:
    """The user the bearer token was issued to."""
    return caller


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: int,
    directory: UserDirectory = Depends(get_directory),
    _caller: User = Depends(get_current_user),
) -> User:
    return await directory.get_by_id(user_id)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: int,
    req: UserUpdate,
    directory: UserDirectory = Depends(get_directory),
    caller: User = Depends(get_current_user),
) -> User:
    """Apply only the fields present in the body."""
    fields = req.model_dump(exclude_unset=True)
    logger.debug("User %s updating user %s", caller.id, user_id)
    return await directory.update(user_id, fields)


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: int,
    directory: UserDirectory = Depends(get_directory),
    caller: User = Depends(get_current_user),
) -> MessageResponse:
    await directory.delete(user_id)
    logger.info("User %s deleted user %s", caller.id, user_id)
    return MessageResponse(message="User deleted successfully")
