"""
Notification API Endpoints
"""
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from application.dispatcher import Dispatcher
from application.identity import CallerIdentity
from application.services.notifications.commands import (
    GetMyNotifications,
    GetUnreadCount,
    MarkNotificationAsRead,
    MarkAllNotificationsAsRead,
    CreateNotification,
)
from presentation.api.v1.dependencies import dispatcher_dependency, get_caller
from presentation.api.v1.responses import to_response
from presentation.api.v1.schemas.common import present
from presentation.api.v1.schemas.notifications import CreateNotificationRequest


router = APIRouter()


@router.get("")
async def my_notifications(
    unread_only: Optional[bool] = Query(None, alias="unreadOnly"),
    page: Optional[int] = Query(None),
    page_size: Optional[int] = Query(None, alias="pageSize"),
    caller: CallerIdentity = Depends(get_caller),
    dispatcher: Dispatcher = Depends(dispatcher_dependency),
):
    """Newest first, with the unread count alongside the page"""
    result = await dispatcher.dispatch(
        GetMyNotifications, caller, **present(unread_only=unread_only, page=page, page_size=page_size)
    )
    return to_response(result)


@router.get("/unread-count")
async def unread_count(
    caller: CallerIdentity = Depends(get_caller),
    dispatcher: Dispatcher = Depends(dispatcher_dependency),
):
    result = await dispatcher.dispatch(GetUnreadCount, caller)
    return to_response(result)


@router.post("/read-all")
async def mark_all_as_read(
    caller: CallerIdentity = Depends(get_caller),
    dispatcher: Dispatcher = Depends(dispatcher_dependency),
):
    result = await dispatcher.dispatch(MarkAllNotificationsAsRead, caller)
    return to_response(result)


@router.post("/{notification_id}/read")
async def mark_as_read(
    notification_id: UUID,
    caller: CallerIdentity = Depends(get_caller),
    dispatcher: Dispatcher = Depends(dispatcher_dependency),
):
    result = await dispatcher.dispatch(MarkNotificationAsRead, caller, notification_id=notification_id)
    return to_response(result)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_notification(
    body: CreateNotificationRequest,
    caller: CallerIdentity = Depends(get_caller),
    dispatcher: Dispatcher = Depends(dispatcher_dependency),
):
    """Internal: admin or ApiUser callers only"""
    result = await dispatcher.dispatch(CreateNotification, caller, **body.fields())
    return to_response(result, status.HTTP_201_CREATED)
