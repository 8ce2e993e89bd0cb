"""
Authentication API endpoints for sign-up, sign-in and the current user.
"""

from fastapi import APIRouter, Depends, status
from plot_catalog.models.user import User
from plot_catalog.services.auth import AuthService
from plot_catalog.schemas.auth import (
    CurrentUserResponse,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    UserResponse,
)
from plot_catalog.schemas.error import get_auth_error_responses, get_error_responses
from plot_catalog.utils.dependencies import (
    AdminAllowList,
    get_admin_allow_list,
    get_auth_service,
    get_current_user,
)
from plot_catalog.config import settings


router = APIRouter(prefix="/auth", tags=["Authentication"])


def _current_user_response(user: User, allow_list: AdminAllowList) -> CurrentUserResponse:
    return CurrentUserResponse(**user.to_dict(), is_admin=allow_list.is_admin(user.email))


@router.post(
    "/register",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Sign up",
    responses=get_error_responses(409, 422)
)
async def register(
    register_data: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> UserResponse:
    """
    Create an account.

    Raises:
        DuplicateResourceError: If the email is already registered
    """
    user = await auth_service.register(register_data)
    return UserResponse.model_validate(user.to_dict())


@router.post(
    "/login",
    response_model=LoginResponse,
    status_code=status.HTTP_200_OK,
    summary="Sign in",
    description="Authenticate with email and password, returns a bearer token",
    responses=get_error_responses(401, 422)
)
async def login(
    login_data: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
    allow_list: AdminAllowList = Depends(get_admin_allow_list)
) -> LoginResponse:
    user, access_token = await auth_service.login(
        email=login_data.email,
        password=login_data.password
    )

    return LoginResponse(
        user=_current_user_response(user, allow_list),
        access_token=access_token,
        token_type="bearer",
        expires_in=settings.access_token_expire_minutes * 60
    )


@router.get(
    "/me",
    response_model=CurrentUserResponse,
    status_code=status.HTTP_200_OK,
    summary="Get current user",
    responses=get_auth_error_responses()
)
async def get_current_user_info(
    current_user: User = Depends(get_current_user),
    allow_list: AdminAllowList = Depends(get_admin_allow_list)
) -> CurrentUserResponse:
    """Caller's account and whether they may use the admin API."""
    return _current_user_response(current_user, allow_list)
