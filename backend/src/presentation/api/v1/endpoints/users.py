"""
User Account API Endpoints
Own account maintenance and admin moderation
"""
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from application.dispatcher import Dispatcher
from application.identity import CallerIdentity
from application.services.users.commands import (
    GetUser,
    UpdateMyAccount,
    SearchUsers,
    SuspendUser,
    ReinstateUser,
    DeleteUser,
    UpdateUserRoles,
)
from domain.enums import AccountStatus
from presentation.api.v1.dependencies import dispatcher_dependency, get_caller
from presentation.api.v1.responses import to_response
from presentation.api.v1.schemas.common import present
from presentation.api.v1.schemas.users import SuspendUserRequest, UpdateAccountRequest, UpdateRolesRequest


router = APIRouter()


@router.patch("/me")
async def update_my_account(
    body: UpdateAccountRequest,
    caller: CallerIdentity = Depends(get_caller),
    dispatcher: Dispatcher = Depends(dispatcher_dependency),
):
    """Update own name and phone"""
    result = await dispatcher.dispatch(UpdateMyAccount, caller, **body.fields())
    return to_response(result)


@router.get("")
async def search_users(
    search: Optional[str] = Query(None, description="Matches e-mail, first or last name"),
    account_status: Optional[AccountStatus] = Query(None, alias="status"),
    page: Optional[int] = Query(None),
    page_size: Optional[int] = Query(None, alias="pageSize"),
    caller: CallerIdentity = Depends(get_caller),
    dispatcher: Dispatcher = Depends(dispatcher_dependency),
):
    """Admin only"""
    result = await dispatcher.dispatch(
        SearchUsers, caller, **present(search=search, status=account_status, page=page, page_size=page_size)
    )
    return to_response(result)


@router.get("/{user_id}")
async def get_user(
    user_id: UUID,
    caller: CallerIdentity = Depends(get_caller),
    dispatcher: Dispatcher = Depends(dispatcher_dependency),
):
    result = await dispatcher.dispatch(GetUser, caller, user_id=user_id)
    return to_response(result)


@router.post("/{user_id}/suspend")
async def suspend_user(
    user_id: UUID,
    body: SuspendUserRequest,
    caller: CallerIdentity = Depends(get_caller),
    dispatcher: Dispatcher = Depends(dispatcher_dependency),
):
    result = await dispatcher.dispatch(SuspendUser, caller, user_id=user_id, **body.fields())
    return to_response(result)


@router.post("/{user_id}/reinstate")
async def reinstate_user(
    user_id: UUID,
    caller: CallerIdentity = Depends(get_caller),
    dispatcher: Dispatcher = Depends(dispatcher_dependency),
):
    result = await dispatcher.dispatch(ReinstateUser, caller, user_id=user_id)
    return to_response(result)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: UUID,
    caller: CallerIdentity = Depends(get_caller),
    dispatcher: Dispatcher = Depends(dispatcher_dependency),
):
    """Soft delete; the account can no longer sign in"""
    result = await dispatcher.dispatch(DeleteUser, caller, user_id=user_id)
    return to_response(result)


@router.put("/{user_id}/roles", status_code=status.HTTP_204_NO_CONTENT)
async def update_user_roles(
    user_id: UUID,
    body: UpdateRolesRequest,
    caller: CallerIdentity = Depends(get_caller),
    dispatcher: Dispatcher = Depends(dispatcher_dependency),
):
    """Admin only; replaces the account's roles"""
    result = await dispatcher.dispatch(UpdateUserRoles, caller, user_id=user_id, **body.fields())
    return to_response(result)
