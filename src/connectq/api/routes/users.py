"""
User account endpoints.

    - ``POST /api/users/``    register an account (client or company side)
    - ``GET  /api/users/me``  the account named by ``X-User-Id``
"""

from fastapi import APIRouter, Depends

from connectq.api.dependencies import get_current_user, get_users
from connectq.api.schemas import ErrorResponse, UserCreateRequest, UserSchema
from connectq.core import User
from connectq.database import UserRepository

router = APIRouter()


@router.post(
    "/",
    response_model=UserSchema,
    status_code=201,
    responses={409: {"model": ErrorResponse}},
    summary="Register a user",
)
async def create_user(
    body: UserCreateRequest,
    users: UserRepository = Depends(get_users),
) -> UserSchema:
    """Create an account. Duplicate emails return 409."""
    user = users.create(email=body.email, name=body.name, role=body.role)
    return UserSchema.from_user(user)


@router.get(
    "/me",
    response_model=UserSchema,
    responses={401: {"model": ErrorResponse}},
    summary="Current user",
)
async def get_me(user: User = Depends(get_current_user)) -> UserSchema:
    return UserSchema.from_user(user)
