"""
User Account Handlers
Self-service account edits and admin moderation
"""
from loguru import logger

from core.clock import utc_now
from core.pagination import Page
from core.result import Result, Ok, access_denied, not_found
from application.dispatcher import Dispatcher
from application.identity import CallerIdentity, require_authenticated
from application.repositories.interfaces import IUnitOfWork, IUserRepository, UserSearchFilters
from .commands import GetUser, UpdateMyAccount, SearchUsers, SuspendUser, ReinstateUser, DeleteUser, UpdateUserRoles
from .dtos import UserDto


class UserHandlers:
    """Handlers for the users area"""

    def __init__(self, user_repository: IUserRepository):
        self.user_repo = user_repository

    def register(self, dispatcher: Dispatcher) -> None:
        dispatcher.register(GetUser, self.get_user)
        dispatcher.register(UpdateMyAccount, self.update_my_account)
        dispatcher.register(SearchUsers, self.search_users)
        dispatcher.register(SuspendUser, self.suspend_user)
        dispatcher.register(ReinstateUser, self.reinstate_user)
        dispatcher.register(DeleteUser, self.delete_user)
        dispatcher.register(UpdateUserRoles, self.update_user_roles)

    async def get_user(self, request: GetUser, caller: CallerIdentity, uow: IUnitOfWork) -> Result:
        denied = require_authenticated(caller)
        if denied:
            return denied
        user = await self.user_repo.get_by_id(uow, request.user_id)
        if user is None:
            return not_found("User", request.user_id)
        if not (caller.is_self(user.id) or caller.is_admin):
            return access_denied("You can only view your own account.")
        return Ok(UserDto.from_entity(user))

    async def update_my_account(self, request: UpdateMyAccount, caller: CallerIdentity, uow: IUnitOfWork) -> Result:
        denied = require_authenticated(caller)
        if denied:
            return denied
        user = await self.user_repo.get_by_id(uow, caller.user_id)
        if user is None:
            return not_found("User", caller.user_id)

        updated = user.update_contact(request.first_name, request.last_name, request.phone, utc_now())
        updated = await self.user_repo.save(uow, updated)
        return Ok(UserDto.from_entity(updated))

    async def search_users(self, request: SearchUsers, caller: CallerIdentity, uow: IUnitOfWork) -> Result:
        denied = require_authenticated(caller)
        if denied:
            return denied
        if not caller.is_admin:
            return access_denied("Only administrators can search users.")

        filters = UserSearchFilters(search=request.search or None, status=request.status)
        items, total = await self.user_repo.search(uow, filters, request.page, request.page_size)
        return Ok(Page([UserDto.from_entity(u) for u in items], total, request.page, request.page_size))

    async def suspend_user(self, request: SuspendUser, caller: CallerIdentity, uow: IUnitOfWork) -> Result:
        denied = self._require_admin(caller)
        if denied:
            return denied
        user = await self.user_repo.get_by_id(uow, request.user_id)
        if user is None:
            return not_found("User", request.user_id)

        suspended = user.suspend(request.reason, caller.user_id, utc_now())
        if not suspended.is_ok:
            return suspended
        user = await self.user_repo.save(uow, suspended.value)
        logger.info(f"User {user.id} suspended by {caller.user_id}: {request.reason}")
        return Ok(UserDto.from_entity(user))

    async def reinstate_user(self, request: ReinstateUser, caller: CallerIdentity, uow: IUnitOfWork) -> Result:
        denied = self._require_admin(caller)
        if denied:
            return denied
        user = await self.user_repo.get_by_id(uow, request.user_id)
        if user is None:
            return not_found("User", request.user_id)

        reinstated = user.reinstate(utc_now())
        if not reinstated.is_ok:
            return reinstated
        user = await self.user_repo.save(uow, reinstated.value)
        logger.info(f"User {user.id} reinstated by {caller.user_id}")
        return Ok(UserDto.from_entity(user))

    async def delete_user(self, request: DeleteUser, caller: CallerIdentity, uow: IUnitOfWork) -> Result:
        denied = self._require_admin(caller)
        if denied:
            return denied
        user = await self.user_repo.get_by_id(uow, request.user_id)
        if user is None:
            return not_found("User", request.user_id)

        deleted = user.soft_delete(caller.user_id, utc_now())
        if not deleted.is_ok:
            return deleted
        await self.user_repo.save(uow, deleted.value)
        logger.info(f"User {user.id} deleted by {caller.user_id}")
        return Ok(None)

    async def update_user_roles(self, request: UpdateUserRoles, caller: CallerIdentity, uow: IUnitOfWork) -> Result:
        denied = self._require_admin(caller)
        if denied:
            return denied
        user = await self.user_repo.get_by_id(uow, request.user_id)
        if user is None:
            return not_found("User", request.user_id)

        updated = user.set_roles(request.roles, caller.user_id, utc_now())
        if not updated.is_ok:
            return updated
        await self.user_repo.save(uow, updated.value)
        roles = ", ".join(r.value for r in updated.value.roles)
        logger.info(f"User {user.id} roles set to [{roles}] by {caller.user_id}")
        return Ok(None)

    @staticmethod
    def _require_admin(caller: CallerIdentity):
        denied = require_authenticated(caller)
        if denied:
            return denied
        if not caller.is_admin:
            return access_denied("Only administrators can moderate accounts.")
        return None
