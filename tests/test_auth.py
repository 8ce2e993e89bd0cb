"""
Tests for token handling and the authentication service.
"""

import uuid
from datetime import timedelta

import pytest
from jose import JWTError

from plot_catalog.schemas.auth import RegisterRequest
from plot_catalog.services.auth import AuthService
from plot_catalog.utils.auth import create_access_token, verify_token
from plot_catalog.utils.exceptions import (
    DuplicateResourceError,
    InactiveUserError,
    InvalidCredentialsError,
    InvalidTokenError,
)
from tests.conftest import TEST_PASSWORD, UserFactory


@pytest.fixture
def auth_service(db_session) -> AuthService:
    return AuthService(db_session)


class TestTokens:
    """JWT round trip and rejection."""

    def test_verify_token(self):
        user_id = uuid.uuid4()
        payload = verify_token(create_access_token(user_id=user_id, email="a@test.com"))

        assert payload.user_id == str(user_id)
        assert payload.email == "a@test.com"

    def test_expired_token(self):
        token = create_access_token(uuid.uuid4(), "a@test.com", expires_delta=timedelta(seconds=-5))

        with pytest.raises(JWTError):
            verify_token(token)

    def test_tampered_token(self):
        token = create_access_token(uuid.uuid4(), "a@test.com")

        with pytest.raises(JWTError):
            verify_token(token[:-4] + "abcd")


class TestAuthService:
    """Sign-up, sign-in and token resolution."""

    @pytest.mark.asyncio
    async def test_register(self, auth_service):
        user = await auth_service.register(
            RegisterRequest(email="Nueva@Test.com", password="segura123", full_name="Nueva")
        )

        assert user.email == "nueva@test.com"
        assert user.is_active is True

    @pytest.mark.asyncio
    async def test_register_duplicate_any_case(self, auth_service, test_user):
        with pytest.raises(DuplicateResourceError):
            await auth_service.register(RegisterRequest(email="USER@test.com", password="segura123"))

    @pytest.mark.asyncio
    async def test_login(self, auth_service, test_user):
        user, token = await auth_service.login(test_user.email, TEST_PASSWORD)

        assert user.id == test_user.id
        assert verify_token(token).email == test_user.email

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, auth_service, test_user):
        with pytest.raises(InvalidCredentialsError):
            await auth_service.login(test_user.email, "incorrecta")

    @pytest.mark.asyncio
    async def test_get_current_user(self, auth_service, test_user):
        token = create_access_token(test_user.id, test_user.email)

        user = await auth_service.get_current_user(token)

        assert user.id == test_user.id

    @pytest.mark.asyncio
    async def test_get_current_user_bad_token(self, auth_service):
        with pytest.raises(InvalidTokenError):
            await auth_service.get_current_user("garbage")

    @pytest.mark.asyncio
    async def test_get_current_user_deleted(self, auth_service):
        token = create_access_token(uuid.uuid4(), "gone@test.com")

        with pytest.raises(InvalidTokenError, match="User not found"):
            await auth_service.get_current_user(token)

    @pytest.mark.asyncio
    async def test_get_current_user_inactive(self, auth_service, user_repository):
        user = await UserFactory.create_user(user_repository, is_active=False)

        with pytest.raises(InactiveUserError):
            await auth_service.get_current_user(create_access_token(user.id, user.email))
