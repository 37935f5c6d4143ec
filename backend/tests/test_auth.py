"""
Tests for authentication
Registration, login lockout, refresh rotation and the JWT service
"""
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
from pydantic import ValidationError

from application.identity import CallerIdentity
from application.services.auth.commands import (
    ForgotPassword,
    LoginUser,
    RefreshAccessToken,
    RegisterUser,
)
from application.services.auth.handlers import AuthHandlers
from application.services.auth.tokens import digest
from core.result import ErrorKind
from domain.entities import UserAccount
from domain.enums import UserRole
from infrastructure.security.jwt_service import JwtService
from infrastructure.security.password_hasher import BcryptPasswordHasher


PASSWORD = "Str0ng!Pass"


def _echo(uow, entity):
    return entity


@pytest.fixture
def hasher():
    return BcryptPasswordHasher(rounds=4)


@pytest.fixture
def jwt_service():
    return JwtService(secret_key="test-secret-key-with-enough-length")


@pytest.fixture
def user(hasher):
    return UserAccount.create(
        email="dev@example.com",
        password_hash=hasher.hash_password(PASSWORD),
        first_name="Dev",
        last_name="Eloper",
        roles=[UserRole.CANDIDATE],
    )


@pytest.fixture
def user_repo(user):
    repo = AsyncMock()
    repo.exists_by_email.return_value = False
    repo.get_by_email.return_value = user
    repo.add.side_effect = _echo
    repo.save.side_effect = _echo
    return repo


@pytest.fixture
def email_sender():
    return AsyncMock()


@pytest.fixture
def handlers(user_repo, hasher, jwt_service, email_sender):
    return AuthHandlers(user_repo, hasher, jwt_service, email_sender)


class TestRegisterRequest:
    """Request-level validation of registration"""

    def test_weak_password_is_rejected(self):
        with pytest.raises(ValidationError):
            RegisterUser(
                email="a@example.com", password="password", confirm_password="password",
                first_name="A", last_name="B",
            )

    def test_mismatched_confirmation_is_rejected(self):
        with pytest.raises(ValidationError):
            RegisterUser(
                email="a@example.com", password=PASSWORD, confirm_password=PASSWORD + "x",
                first_name="A", last_name="B",
            )

    def test_defaults_to_candidate(self):
        request = RegisterUser(
            email="a@example.com", password=PASSWORD, confirm_password=PASSWORD,
            first_name="A", last_name="B",
        )
        assert request.roles == [UserRole.CANDIDATE]


class TestRegister:

    @pytest.mark.asyncio
    async def test_register_sends_verification(self, handlers, email_sender, mock_uow):
        request = RegisterUser(
            email="New@Example.com", password=PASSWORD, confirm_password=PASSWORD,
            first_name="New", last_name="User",
        )
        result = await handlers.register_user(request, CallerIdentity.anonymous(), mock_uow)

        assert result.is_ok
        assert result.value.email == "new@example.com"
        email_sender.send.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_taken_email_conflicts(self, handlers, user_repo, mock_uow):
        user_repo.exists_by_email.return_value = True
        request = RegisterUser(
            email="dev@example.com", password=PASSWORD, confirm_password=PASSWORD,
            first_name="Dev", last_name="Eloper",
        )
        result = await handlers.register_user(request, CallerIdentity.anonymous(), mock_uow)
        assert result.error.kind == ErrorKind.CONFLICT

    @pytest.mark.asyncio
    async def test_admin_role_cannot_be_self_assigned(self, handlers, mock_uow):
        request = RegisterUser(
            email="boss@example.com", password=PASSWORD, confirm_password=PASSWORD,
            first_name="Boss", last_name="Person", roles=[UserRole.SUPER_ADMIN],
        )
        result = await handlers.register_user(request, CallerIdentity.anonymous(), mock_uow)
        assert result.error.kind == ErrorKind.VALIDATION


class TestLogin:

    @pytest.mark.asyncio
    async def test_login_issues_tokens(self, handlers, jwt_service, user, mock_uow):
        result = await handlers.login(LoginUser(email="DEV@example.com", password=PASSWORD), None, mock_uow)

        tokens = result.value
        assert tokens.token_type == "bearer"
        payload = jwt_service.verify_token(tokens.access_token)
        assert payload["sub"] == str(user.id)
        assert payload["roles"] == ["Candidate"]

    @pytest.mark.asyncio
    async def test_wrong_password_is_counted_and_committed(self, handlers, user_repo, mock_uow):
        result = await handlers.login(LoginUser(email="dev@example.com", password="Wrong!Pass1"), None, mock_uow)

        assert result.error.kind == ErrorKind.UNAUTHENTICATED
        saved = user_repo.save.call_args.args[1]
        assert saved.failed_login_attempts == 1
        mock_uow.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unknown_email_gives_same_error(self, handlers, user_repo, mock_uow):
        user_repo.get_by_email.return_value = None
        result = await handlers.login(LoginUser(email="nobody@example.com", password=PASSWORD), None, mock_uow)
        assert result.error.kind == ErrorKind.UNAUTHENTICATED
        assert result.error.message == "Invalid credentials."

    @pytest.mark.asyncio
    async def test_locked_account_is_refused_even_with_right_password(self, handlers, user_repo, user, mock_uow):
        locked = user
        for _ in range(5):
            locked = locked.record_failed_login()
        user_repo.get_by_email.return_value = locked

        result = await handlers.login(LoginUser(email="dev@example.com", password=PASSWORD), None, mock_uow)

        assert result.error.kind == ErrorKind.DOMAIN_RULE
        assert result.error.code == "user.locked_out"

    @pytest.mark.asyncio
    async def test_suspended_account_is_refused(self, handlers, user_repo, user, mock_uow):
        user_repo.get_by_email.return_value = user.suspend("spam", actor_id=uuid4()).value
        result = await handlers.login(LoginUser(email="dev@example.com", password=PASSWORD), None, mock_uow)
        assert result.error.kind == ErrorKind.ACCESS_DENIED


class TestRefresh:

    @pytest.mark.asyncio
    async def test_rotation_returns_new_token_once(self, handlers, user_repo, mock_uow):
        login = await handlers.login(LoginUser(email="dev@example.com", password=PASSWORD), None, mock_uow)
        logged_in = user_repo.save.call_args.args[1]
        user_repo.get_by_refresh_token.return_value = logged_in

        first_refresh = login.value.refresh_token
        refreshed = await handlers.refresh(RefreshAccessToken(refresh_token=first_refresh), None, mock_uow)
        assert refreshed.is_ok
        assert refreshed.value.refresh_token != first_refresh

        rotated = user_repo.save.call_args.args[1]
        assert not rotated.find_refresh_token(digest(first_refresh)).is_active()

        user_repo.get_by_refresh_token.return_value = rotated
        reused = await handlers.refresh(RefreshAccessToken(refresh_token=first_refresh), None, mock_uow)
        assert reused.error.kind == ErrorKind.UNAUTHENTICATED


class TestForgotPassword:

    @pytest.mark.asyncio
    async def test_unknown_address_still_succeeds(self, handlers, user_repo, email_sender, mock_uow):
        user_repo.get_by_email.return_value = None
        result = await handlers.forgot_password(ForgotPassword(email="ghost@example.com"), None, mock_uow)
        assert result.is_ok
        email_sender.send.assert_not_awaited()


class TestJwtService:

    def test_round_trip(self, jwt_service):
        user_id = uuid4()
        token = jwt_service.create_access_token(user_id, "a@example.com", ["Employer"])
        payload = jwt_service.verify_token(token)
        assert payload["sub"] == str(user_id)
        assert payload["type"] == "access"

    def test_tampered_token_is_rejected(self, jwt_service):
        header, payload, _ = jwt_service.create_access_token(uuid4(), "a@example.com", []).split(".")
        signature = jwt_service.create_access_token(uuid4(), "b@example.com", []).split(".")[2]
        assert jwt_service.verify_token(f"{header}.{payload}.{signature}") is None

    def test_token_from_other_key_is_rejected(self, jwt_service):
        other = JwtService(secret_key="another-secret-key-entirely-different")
        token = other.create_access_token(uuid4(), "a@example.com", [])
        assert jwt_service.verify_token(token) is None
