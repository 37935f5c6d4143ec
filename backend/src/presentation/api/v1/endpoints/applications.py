"""
Job Application API Endpoints
Candidates apply and withdraw; employers review and move applications along
"""
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from application.dispatcher import Dispatcher
from application.identity import CallerIdentity
from application.services.applications.commands import (
    ApplyToJob,
    GetApplication,
    GetMyApplications,
    GetJobApplications,
    UpdateApplicationStatus,
    WithdrawApplication,
)
from domain.value_objects import ApplicationStatus
from presentation.api.v1.dependencies import dispatcher_dependency, get_caller
from presentation.api.v1.responses import to_response
from presentation.api.v1.schemas.applications import ApplyRequest, StatusUpdateRequest
from presentation.api.v1.schemas.common import present


router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
async def apply_to_job(
    body: ApplyRequest,
    caller: CallerIdentity = Depends(get_caller),
    dispatcher: Dispatcher = Depends(dispatcher_dependency),
):
    """
    Apply to an active job (Candidate role).

    Returns 409 for a second application to the same job and 402 once the
    monthly plan limit is reached.
    """
    result = await dispatcher.dispatch(ApplyToJob, caller, **body.fields())
    return to_response(result, status.HTTP_201_CREATED)


@router.get("/mine")
async def my_applications(
    application_status: Optional[ApplicationStatus] = Query(None, alias="status"),
    page: Optional[int] = Query(None),
    page_size: Optional[int] = Query(None, alias="pageSize"),
    caller: CallerIdentity = Depends(get_caller),
    dispatcher: Dispatcher = Depends(dispatcher_dependency),
):
    result = await dispatcher.dispatch(
        GetMyApplications, caller, **present(status=application_status, page=page, page_size=page_size)
    )
    return to_response(result)


@router.get("/job/{job_id}")
async def job_applications(
    job_id: UUID,
    application_status: Optional[ApplicationStatus] = Query(None, alias="status"),
    page: Optional[int] = Query(None),
    page_size: Optional[int] = Query(None, alias="pageSize"),
    caller: CallerIdentity = Depends(get_caller),
    dispatcher: Dispatcher = Depends(dispatcher_dependency),
):
    """Job owner or admin"""
    result = await dispatcher.dispatch(
        GetJobApplications,
        caller,
        job_id=job_id,
        **present(status=application_status, page=page, page_size=page_size),
    )
    return to_response(result)


@router.get("/{application_id}")
async def get_application(
    application_id: UUID,
    caller: CallerIdentity = Depends(get_caller),
    dispatcher: Dispatcher = Depends(dispatcher_dependency),
):
    result = await dispatcher.dispatch(GetApplication, caller, application_id=application_id)
    return to_response(result)


@router.patch("/{application_id}/status")
async def update_application_status(
    application_id: UUID,
    body: StatusUpdateRequest,
    caller: CallerIdentity = Depends(get_caller),
    dispatcher: Dispatcher = Depends(dispatcher_dependency),
):
    """Job owner or admin; the candidate is notified"""
    result = await dispatcher.dispatch(
        UpdateApplicationStatus, caller, application_id=application_id, **body.fields()
    )
    return to_response(result)


@router.post("/{application_id}/withdraw", status_code=status.HTTP_204_NO_CONTENT)
async def withdraw_application(
    application_id: UUID,
    caller: CallerIdentity = Depends(get_caller),
    dispatcher: Dispatcher = Depends(dispatcher_dependency),
):
    result = await dispatcher.dispatch(WithdrawApplication, caller, application_id=application_id)
    return to_response(result)
