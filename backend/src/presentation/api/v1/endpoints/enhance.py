"""
Job Enhancer API Endpoints
"""
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from application.dispatcher import Dispatcher
from application.identity import CallerIdentity
from application.services.enhancer.commands import (
    EnhanceJobDescription,
    GetEnhancement,
    GetJobEnhancements,
    GetMyEnhancements,
    AcceptEnhancement,
)
from presentation.api.v1.dependencies import dispatcher_dependency, get_caller
from presentation.api.v1.responses import to_response
from presentation.api.v1.schemas.common import present
from presentation.api.v1.schemas.enhance import EnhanceRequest


router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
async def enhance_job_description(
    body: EnhanceRequest,
    caller: CallerIdentity = Depends(get_caller),
    dispatcher: Dispatcher = Depends(dispatcher_dependency),
):
    """
    Rewrite a job description with scores, bias findings and suggestions.

    The posting is unchanged until the enhancement is accepted.
    """
    result = await dispatcher.dispatch(EnhanceJobDescription, caller, **body.fields())
    return to_response(result, status.HTTP_201_CREATED)


@router.get("/mine")
async def my_enhancements(
    page: Optional[int] = Query(None),
    page_size: Optional[int] = Query(None, alias="pageSize"),
    caller: CallerIdentity = Depends(get_caller),
    dispatcher: Dispatcher = Depends(dispatcher_dependency),
):
    result = await dispatcher.dispatch(GetMyEnhancements, caller, **present(page=page, page_size=page_size))
    return to_response(result)


@router.get("/job/{job_id}")
async def job_enhancements(
    job_id: UUID,
    page: Optional[int] = Query(None),
    page_size: Optional[int] = Query(None, alias="pageSize"),
    caller: CallerIdentity = Depends(get_caller),
    dispatcher: Dispatcher = Depends(dispatcher_dependency),
):
    result = await dispatcher.dispatch(
        GetJobEnhancements, caller, job_id=job_id, **present(page=page, page_size=page_size)
    )
    return to_response(result)


@router.get("/{enhancement_id}")
async def get_enhancement(
    enhancement_id: UUID,
    caller: CallerIdentity = Depends(get_caller),
    dispatcher: Dispatcher = Depends(dispatcher_dependency),
):
    result = await dispatcher.dispatch(GetEnhancement, caller, enhancement_id=enhancement_id)
    return to_response(result)


@router.post("/{enhancement_id}/accept")
async def accept_enhancement(
    enhancement_id: UUID,
    caller: CallerIdentity = Depends(get_caller),
    dispatcher: Dispatcher = Depends(dispatcher_dependency),
):
    """Apply the enhanced title, description, requirements and skills to the job"""
    result = await dispatcher.dispatch(AcceptEnhancement, caller, enhancement_id=enhancement_id)
    return to_response(result)
