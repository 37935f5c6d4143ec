"""
Job Posting API Endpoints
Employer lifecycle (draft, publish, pause, close) and public search
"""
from decimal import Decimal
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from application.dispatcher import Dispatcher
from application.identity import CallerIdentity
from application.services.jobs.commands import (
    CreateJob,
    UpdateJob,
    PublishJob,
    PauseJob,
    CloseJob,
    GetJob,
    SearchJobs,
    GetMyJobs,
)
from domain.enums import ExperienceLevel, JobType, WorkMode
from domain.value_objects import JobStatus
from presentation.api.v1.dependencies import dispatcher_dependency, get_caller
from presentation.api.v1.responses import to_response
from presentation.api.v1.schemas.common import present
from presentation.api.v1.schemas.jobs import JobCreateRequest, JobUpdateRequest


router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_job(
    body: JobCreateRequest,
    caller: CallerIdentity = Depends(get_caller),
    dispatcher: Dispatcher = Depends(dispatcher_dependency),
):
    """
    Create a job posting (Employer or HiringManager).

    Saved as a draft unless `publish` is true.
    """
    result = await dispatcher.dispatch(CreateJob, caller, **body.fields())
    return to_response(result, status.HTTP_201_CREATED)


@router.get("")
async def search_jobs(
    keyword: Optional[str] = Query(None, description="Matches title or description"),
    country: Optional[str] = Query(None),
    location: Optional[str] = Query(None),
    job_type: Optional[JobType] = Query(None, alias="jobType"),
    work_mode: Optional[WorkMode] = Query(None, alias="workMode"),
    experience_level: Optional[ExperienceLevel] = Query(None, alias="experienceLevel"),
    salary_min: Optional[Decimal] = Query(None, alias="salaryMin"),
    salary_max: Optional[Decimal] = Query(None, alias="salaryMax"),
    page: Optional[int] = Query(None),
    page_size: Optional[int] = Query(None, alias="pageSize"),
    caller: CallerIdentity = Depends(get_caller),
    dispatcher: Dispatcher = Depends(dispatcher_dependency),
):
    """Active postings only; salary filters ignore hidden salaries"""
    result = await dispatcher.dispatch(SearchJobs, caller, **present(
        keyword=keyword,
        country=country,
        location=location,
        job_type=job_type,
        work_mode=work_mode,
        experience_level=experience_level,
        salary_min=salary_min,
        salary_max=salary_max,
        page=page,
        page_size=page_size,
    ))
    return to_response(result)


@router.get("/mine")
async def my_jobs(
    job_status: Optional[JobStatus] = Query(None, alias="status"),
    page: Optional[int] = Query(None),
    page_size: Optional[int] = Query(None, alias="pageSize"),
    caller: CallerIdentity = Depends(get_caller),
    dispatcher: Dispatcher = Depends(dispatcher_dependency),
):
    result = await dispatcher.dispatch(
        GetMyJobs, caller, **present(status=job_status, page=page, page_size=page_size)
    )
    return to_response(result)


@router.get("/{job_id}")
async def get_job(
    job_id: UUID,
    caller: CallerIdentity = Depends(get_caller),
    dispatcher: Dispatcher = Depends(dispatcher_dependency),
):
    """Counts a view unless the caller owns the posting"""
    result = await dispatcher.dispatch(GetJob, caller, job_id=job_id)
    return to_response(result)


@router.patch("/{job_id}")
async def update_job(
    job_id: UUID,
    body: JobUpdateRequest,
    caller: CallerIdentity = Depends(get_caller),
    dispatcher: Dispatcher = Depends(dispatcher_dependency),
):
    result = await dispatcher.dispatch(UpdateJob, caller, job_id=job_id, **body.fields())
    return to_response(result)


@router.post("/{job_id}/publish")
async def publish_job(
    job_id: UUID,
    caller: CallerIdentity = Depends(get_caller),
    dispatcher: Dispatcher = Depends(dispatcher_dependency),
):
    result = await dispatcher.dispatch(PublishJob, caller, job_id=job_id)
    return to_response(result)


@router.post("/{job_id}/pause")
async def pause_job(
    job_id: UUID,
    caller: CallerIdentity = Depends(get_caller),
    dispatcher: Dispatcher = Depends(dispatcher_dependency),
):
    result = await dispatcher.dispatch(PauseJob, caller, job_id=job_id)
    return to_response(result)


@router.delete("/{job_id}", status_code=status.HTTP_204_NO_CONTENT)
async def close_job(
    job_id: UUID,
    caller: CallerIdentity = Depends(get_caller),
    dispatcher: Dispatcher = Depends(dispatcher_dependency),
):
    """Close the posting; closed jobs accept no further applications"""
    result = await dispatcher.dispatch(CloseJob, caller, job_id=job_id)
    return to_response(result)
