"""
Tests for the user moderation and notification read handlers
"""
from datetime import timedelta
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
from pydantic import ValidationError

from application.identity import CallerIdentity
from application.services.notifications.commands import MarkNotificationAsRead
from application.services.notifications.handlers import NotificationHandlers
from application.services.users.commands import DeleteUser, ReinstateUser, SuspendUser, UpdateUserRoles
from application.services.users.handlers import UserHandlers
from core.clock import utc_now
from core.result import ErrorKind
from domain.entities import Notification, UserAccount
from domain.enums import AccountStatus, NotificationType, UserRole


def _echo(uow, entity):
    return entity


def _account(*roles: UserRole) -> UserAccount:
    now = utc_now()
    user = UserAccount.create(
        email="member@example.com",
        password_hash="x",
        first_name="Sam",
        last_name="Member",
        roles=roles or (UserRole.CANDIDATE,),
    )
    return user.issue_refresh_token("a", now + timedelta(days=1), now).issue_refresh_token(
        "b", now + timedelta(days=1), now
    )


@pytest.fixture
def user():
    return _account()


@pytest.fixture
def user_repo(user):
    repo = AsyncMock()
    repo.get_by_id.return_value = user
    repo.save.side_effect = _echo
    return repo


@pytest.fixture
def handlers(user_repo):
    return UserHandlers(user_repo)


class TestSuspendAndReinstate:

    @pytest.mark.asyncio
    async def test_suspend_revokes_sessions(self, handlers, user, user_repo, admin, mock_uow):
        result = await handlers.suspend_user(SuspendUser(user_id=user.id, reason="Spam"), admin, mock_uow)

        assert result.is_ok
        assert result.value.status == "Suspended"
        assert result.value.suspension_reason == "Spam"
        saved = user_repo.save.call_args.args[1]
        assert saved.active_refresh_tokens() == ()

    @pytest.mark.asyncio
    async def test_suspend_requires_admin(self, handlers, user, user_repo, employer, mock_uow):
        result = await handlers.suspend_user(SuspendUser(user_id=user.id, reason="Spam"), employer, mock_uow)
        assert result.error.kind == ErrorKind.ACCESS_DENIED
        user_repo.save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_suspend_unknown_user(self, handlers, user_repo, admin, mock_uow):
        user_repo.get_by_id.return_value = None
        result = await handlers.suspend_user(SuspendUser(user_id=uuid4(), reason="Spam"), admin, mock_uow)
        assert result.error.kind == ErrorKind.NOT_FOUND

    @pytest.mark.asyncio
    async def test_reinstate_suspended_account(self, handlers, user, user_repo, admin, mock_uow):
        user_repo.get_by_id.return_value = user.suspend("Spam", admin.user_id).value
        result = await handlers.reinstate_user(ReinstateUser(user_id=user.id), admin, mock_uow)

        assert result.is_ok
        assert result.value.status == "Active"
        assert result.value.suspension_reason is None

    @pytest.mark.asyncio
    async def test_reinstate_active_account_is_invalid(self, handlers, user, user_repo, admin, mock_uow):
        result = await handlers.reinstate_user(ReinstateUser(user_id=user.id), admin, mock_uow)
        assert result.error.kind == ErrorKind.INVALID_TRANSITION
        user_repo.save.assert_not_awaited()


class TestDeleteUser:

    @pytest.mark.asyncio
    async def test_soft_delete(self, handlers, user, user_repo, admin, mock_uow):
        result = await handlers.delete_user(DeleteUser(user_id=user.id), admin, mock_uow)

        assert result.is_ok
        assert result.value is None
        saved = user_repo.save.call_args.args[1]
        assert saved.status == AccountStatus.DELETED
        assert saved.deleted_by == admin.user_id

    @pytest.mark.asyncio
    async def test_admin_cannot_delete_self(self, handlers, user, mock_uow):
        me = CallerIdentity.authenticated(user.id, [UserRole.SUPER_ADMIN.value])
        result = await handlers.delete_user(DeleteUser(user_id=user.id), me, mock_uow)
        assert result.error.kind == ErrorKind.DOMAIN_RULE

    @pytest.mark.asyncio
    async def test_already_deleted(self, handlers, user, user_repo, admin, mock_uow):
        user_repo.get_by_id.return_value = user.soft_delete(admin.user_id).value
        result = await handlers.delete_user(DeleteUser(user_id=user.id), admin, mock_uow)
        assert result.error.kind == ErrorKind.INVALID_TRANSITION


class TestUpdateUserRoles:

    @pytest.mark.asyncio
    async def test_replaces_roles(self, handlers, user, user_repo, admin, mock_uow):
        request = UpdateUserRoles(user_id=user.id, roles=[UserRole.EMPLOYER, UserRole.HIRING_MANAGER])
        result = await handlers.update_user_roles(request, admin, mock_uow)

        assert result.is_ok
        saved = user_repo.save.call_args.args[1]
        assert saved.roles == (UserRole.EMPLOYER, UserRole.HIRING_MANAGER)
        assert saved.updated_at >= user.updated_at

    @pytest.mark.asyncio
    async def test_requires_admin(self, handlers, user, employer, mock_uow):
        request = UpdateUserRoles(user_id=user.id, roles=[UserRole.EMPLOYER])
        result = await handlers.update_user_roles(request, employer, mock_uow)
        assert result.error.kind == ErrorKind.ACCESS_DENIED

    @pytest.mark.asyncio
    async def test_cannot_change_own_roles(self, handlers, user, user_repo, mock_uow):
        me = CallerIdentity.authenticated(user.id, [UserRole.MODERATOR.value])
        result = await handlers.update_user_roles(UpdateUserRoles(user_id=user.id, roles=[UserRole.EMPLOYER]), me, mock_uow)
        assert result.error.kind == ErrorKind.DOMAIN_RULE
        assert result.error.code == "user.self_role_change"
        user_repo.save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_super_admin_target_is_locked(self, handlers, user_repo, admin, mock_uow):
        target = _account(UserRole.SUPER_ADMIN)
        user_repo.get_by_id.return_value = target
        result = await handlers.update_user_roles(
            UpdateUserRoles(user_id=target.id, roles=[UserRole.CANDIDATE]), admin, mock_uow
        )
        assert result.error.kind == ErrorKind.DOMAIN_RULE
        assert result.error.code == "user.super_admin_roles"

    @pytest.mark.asyncio
    async def test_unknown_user(self, handlers, user_repo, admin, mock_uow):
        user_repo.get_by_id.return_value = None
        result = await handlers.update_user_roles(
            UpdateUserRoles(user_id=uuid4(), roles=[UserRole.CANDIDATE]), admin, mock_uow
        )
        assert result.error.kind == ErrorKind.NOT_FOUND

    @pytest.mark.parametrize("roles", [[], [UserRole.SUPER_ADMIN], [UserRole.EMPLOYER, UserRole.SUPER_ADMIN]])
    def test_request_rejects_empty_or_super_admin(self, roles):
        with pytest.raises(ValidationError):
            UpdateUserRoles(user_id=uuid4(), roles=roles)


class TestMarkNotificationAsRead:

    @pytest.fixture
    def notification(self, candidate):
        read_at = utc_now() - timedelta(hours=2)
        return Notification.create(
            user_id=candidate.user_id, type=NotificationType.SYSTEM_ALERT, title="Welcome", message="Hi"
        ).mark_as_read(candidate.user_id, read_at).value

    @pytest.fixture
    def notification_repo(self, notification):
        repo = AsyncMock()
        repo.get_by_id.return_value = notification
        repo.save.side_effect = _echo
        return repo

    @pytest.mark.asyncio
    async def test_second_read_keeps_first_timestamp(self, notification_repo, notification, candidate, mock_uow):
        handlers = NotificationHandlers(notification_repo, AsyncMock())
        result = await handlers.mark_as_read(
            MarkNotificationAsRead(notification_id=notification.id), candidate, mock_uow
        )

        assert result.is_ok
        assert result.value.read_at == notification.read_at
        notification_repo.save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_other_users_notification(self, notification_repo, notification, employer, mock_uow):
        handlers = NotificationHandlers(notification_repo, AsyncMock())
        result = await handlers.mark_as_read(
            MarkNotificationAsRead(notification_id=notification.id), employer, mock_uow
        )
        assert result.error.kind == ErrorKind.ACCESS_DENIED
