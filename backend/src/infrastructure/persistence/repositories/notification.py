"""
Notification Repository Implementation
"""
from datetime import datetime
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import and_, func, select, update
from loguru import logger

from core.clock import as_utc
from core.exceptions import DomainException, RepositoryException
from domain.entities import Notification
from domain.enums import NotificationType
from application.repositories.interfaces import INotificationRepository, IUnitOfWork, NotificationSearchFilters
from infrastructure.persistence.models.notification import NotificationModel
from .base import SQLAlchemyRepository


class SQLAlchemyNotificationRepository(SQLAlchemyRepository, INotificationRepository):
    """SQLAlchemy implementation of the notification repository"""

    resource_type = "Notification"

    async def get_by_id(self, uow: IUnitOfWork, notification_id: UUID) -> Optional[Notification]:
        try:
            result = await self._session(uow).execute(
                select(NotificationModel).where(NotificationModel.id == notification_id)
            )
            model = result.scalar_one_or_none()
            return self._to_entity(model) if model else None
        except Exception as e:
            logger.error(f"Failed to get notification {notification_id}: {str(e)}")
            raise RepositoryException(f"Failed to get notification: {str(e)}")

    async def add(self, uow: IUnitOfWork, notification: Notification) -> Notification:
        session = self._session(uow)
        try:
            session.add(self._to_model(notification))
            await self._flush(session)
            logger.debug(f"Queued notification {notification.id} for user {notification.user_id}")
            return notification
        except DomainException:
            raise
        except Exception as e:
            logger.error(f"Failed to create notification: {str(e)}")
            raise RepositoryException(f"Failed to create notification: {str(e)}")

    async def save(self, uow: IUnitOfWork, notification: Notification) -> Notification:
        session = self._session(uow)
        try:
            await self._require_existing(session, NotificationModel, notification.id)
            await session.merge(self._to_model(notification))
            await self._flush(session)
            return notification
        except DomainException:
            raise
        except Exception as e:
            logger.error(f"Failed to update notification {notification.id}: {str(e)}")
            raise RepositoryException(f"Failed to update notification: {str(e)}")

    async def search(
        self, uow: IUnitOfWork, filters: NotificationSearchFilters, page: int, page_size: int
    ) -> Tuple[List[Notification], int]:
        """Newest notifications first"""
        try:
            query = select(NotificationModel).where(NotificationModel.user_id == filters.user_id)
            if filters.unread_only:
                query = query.where(NotificationModel.is_read.is_(False))

            models, total = await self._page(
                self._session(uow), query, (NotificationModel.created_at.desc(), NotificationModel.id), page, page_size
            )
            return [self._to_entity(m) for m in models], total
        except Exception as e:
            logger.error(f"Failed to list notifications for {filters.user_id}: {str(e)}")
            raise RepositoryException(f"Failed to list notifications: {str(e)}")

    async def count_unread(self, uow: IUnitOfWork, user_id: UUID) -> int:
        try:
            result = await self._session(uow).execute(
                select(func.count(NotificationModel.id)).where(and_(
                    NotificationModel.user_id == user_id,
                    NotificationModel.is_read.is_(False),
                ))
            )
            return result.scalar_one()
        except Exception as e:
            logger.error(f"Failed to count unread notifications for {user_id}: {str(e)}")
            raise RepositoryException(f"Failed to count notifications: {str(e)}")

    async def mark_all_as_read(self, uow: IUnitOfWork, user_id: UUID, read_at: datetime) -> int:
        """Single UPDATE over the user's unread notifications"""
        try:
            result = await self._session(uow).execute(
                update(NotificationModel)
                .where(and_(NotificationModel.user_id == user_id, NotificationModel.is_read.is_(False)))
                .values(is_read=True, read_at=read_at, updated_at=read_at)
                .execution_options(synchronize_session=False)
            )
            return result.rowcount or 0
        except Exception as e:
            logger.error(f"Failed to mark notifications as read for {user_id}: {str(e)}")
            raise RepositoryException(f"Failed to mark notifications as read: {str(e)}")

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            user_id=model.user_id,
            type=NotificationType(model.type),
            title=model.title,
            message=model.message,
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at),
            action_url=model.action_url,
            metadata=dict(model.extra_data) if model.extra_data else None,
            is_read=model.is_read,
            read_at=as_utc(model.read_at),
        )

    @staticmethod
    def _to_model(notification: Notification) -> NotificationModel:
        return NotificationModel(
            id=notification.id,
            user_id=notification.user_id,
            type=notification.type.value,
            title=notification.title,
            message=notification.message,
            action_url=notification.action_url,
            extra_data=notification.metadata,
            is_read=notification.is_read,
            read_at=notification.read_at,
            created_at=notification.created_at,
            updated_at=notification.updated_at,
        )
