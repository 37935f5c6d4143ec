"""
Notification Handlers
"""
from dataclasses import dataclass

from loguru import logger

from core.clock import utc_now
from core.pagination import Page
from core.result import Result, Ok, access_denied, not_found
from application.dispatcher import Dispatcher
from application.identity import CallerIdentity, require_authenticated
from application.repositories.interfaces import (
    INotificationRepository,
    IUnitOfWork,
    IUserRepository,
    NotificationSearchFilters,
)
from domain.entities import Notification
from .commands import (
    GetMyNotifications,
    GetUnreadCount,
    MarkNotificationAsRead,
    MarkAllNotificationsAsRead,
    CreateNotification,
)
from .dtos import NotificationDto, UnreadCountDto, MarkedAsReadDto


@dataclass(frozen=True)
class NotificationPage(Page):
    """A page of notifications plus the caller's unread total"""
    unread_count: int = 0

    def extra_fields(self) -> dict:
        return {"unreadCount": self.unread_count}


class NotificationHandlers:
    """Handlers for the notifications area"""

    def __init__(self, notification_repository: INotificationRepository, user_repository: IUserRepository):
        self.notification_repo = notification_repository
        self.user_repo = user_repository

    def register(self, dispatcher: Dispatcher) -> None:
        dispatcher.register(GetMyNotifications, self.my_notifications)
        dispatcher.register(GetUnreadCount, self.unread_count)
        dispatcher.register(MarkNotificationAsRead, self.mark_as_read)
        dispatcher.register(MarkAllNotificationsAsRead, self.mark_all_as_read)
        dispatcher.register(CreateNotification, self.create_notification)

    async def my_notifications(self, request: GetMyNotifications, caller: CallerIdentity, uow: IUnitOfWork) -> Result:
        denied = require_authenticated(caller)
        if denied:
            return denied

        filters = NotificationSearchFilters(user_id=caller.user_id, unread_only=request.unread_only)
        items, total = await self.notification_repo.search(uow, filters, request.page, request.page_size)
        unread = await self.notification_repo.count_unread(uow, caller.user_id)
        return Ok(NotificationPage(
            [NotificationDto.from_entity(n) for n in items],
            total, request.page, request.page_size,
            unread_count=unread,
        ))

    async def unread_count(self, request: GetUnreadCount, caller: CallerIdentity, uow: IUnitOfWork) -> Result:
        denied = require_authenticated(caller)
        if denied:
            return denied
        count = await self.notification_repo.count_unread(uow, caller.user_id)
        return Ok(UnreadCountDto(unread_count=count))

    async def mark_as_read(self, request: MarkNotificationAsRead, caller: CallerIdentity, uow: IUnitOfWork) -> Result:
        denied = require_authenticated(caller)
        if denied:
            return denied
        notification = await self.notification_repo.get_by_id(uow, request.notification_id)
        if notification is None:
            return not_found("Notification", request.notification_id)

        marked = notification.mark_as_read(caller.user_id, utc_now())
        if not marked.is_ok:
            return marked
        if marked.value is not notification:
            notification = await self.notification_repo.save(uow, marked.value)
        return Ok(NotificationDto.from_entity(notification))

    async def mark_all_as_read(
        self, request: MarkAllNotificationsAsRead, caller: CallerIdentity, uow: IUnitOfWork
    ) -> Result:
        denied = require_authenticated(caller)
        if denied:
            return denied
        updated = await self.notification_repo.mark_all_as_read(uow, caller.user_id, utc_now())
        logger.info(f"Marked {updated} notifications as read for user {caller.user_id}")
        return Ok(MarkedAsReadDto(updated=updated))

    async def create_notification(self, request: CreateNotification, caller: CallerIdentity, uow: IUnitOfWork) -> Result:
        denied = require_authenticated(caller)
        if denied:
            return denied
        if not (caller.is_admin or caller.is_internal_service):
            return access_denied("Only administrators and internal services can create notifications.")

        if await self.user_repo.get_by_id(uow, request.user_id) is None:
            return not_found("User", request.user_id)

        notification = Notification.create(
            user_id=request.user_id,
            type=request.type,
            title=request.title,
            message=request.message,
            action_url=request.action_url,
            metadata=request.metadata,
        )
        notification = await self.notification_repo.add(uow, notification)
        logger.info(f"Notification {notification.id} ({notification.type.value}) created for user {request.user_id}")
        return Ok(NotificationDto.from_entity(notification))
