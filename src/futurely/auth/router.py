"""Account routes: JWT login, registration, password reset, and profile."""

from fastapi import APIRouter

from futurely.auth.schemas import UserCreate, UserRead, UserUpdate
from futurely.auth.service import fastapi_users, jwt_backend

router = APIRouter(prefix="/auth", tags=["auth"])

# POST /auth/login, POST /auth/logout
router.include_router(fastapi_users.get_auth_router(jwt_backend))

# POST /auth/register (name is optional, plan starts as free)
router.include_router(fastapi_users.get_register_router(UserRead, UserCreate))

# POST /auth/forgot-password, POST /auth/reset-password
router.include_router(fastapi_users.get_reset_password_router())

# POST /auth/request-verify-token, POST /auth/verify
router.include_router(fastapi_users.get_verify_router(UserRead))

# GET/PATCH /auth/users/me, plus superuser routes by id
router.include_router(
    fastapi_users.get_users_router(UserRead, UserUpdate),
    prefix="/users",
    tags=["users"],
)
