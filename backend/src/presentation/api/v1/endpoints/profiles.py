"""
Profile API Endpoints
Candidate and employer profiles, including picture, CV and logo uploads
"""
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Query, UploadFile

from application.dispatcher import Dispatcher
from application.identity import CallerIdentity
from application.services.profiles.commands import (
    GetMyCandidateProfile,
    UpsertCandidateProfile,
    GetCandidateProfile,
    SearchCandidates,
    UploadProfilePicture,
    UploadCv,
    GetMyEmployerProfile,
    UpsertEmployerProfile,
    GetEmployerProfile,
    UploadCompanyLogo,
    VerifyEmployerProfile,
)
from domain.enums import AvailabilityStatus, CandidateLevel
from presentation.api.v1.dependencies import dispatcher_dependency, get_caller
from presentation.api.v1.responses import to_response
from presentation.api.v1.schemas.common import present, read_upload
from presentation.api.v1.schemas.profiles import CandidateProfileRequest, EmployerProfileRequest


router = APIRouter()


# ============================================================================
# Candidate profiles
# ============================================================================

@router.get("/candidate/me")
async def my_candidate_profile(
    caller: CallerIdentity = Depends(get_caller),
    dispatcher: Dispatcher = Depends(dispatcher_dependency),
):
    result = await dispatcher.dispatch(GetMyCandidateProfile, caller)
    return to_response(result)


@router.put("/candidate/me")
async def upsert_candidate_profile(
    body: CandidateProfileRequest,
    caller: CallerIdentity = Depends(get_caller),
    dispatcher: Dispatcher = Depends(dispatcher_dependency),
):
    """Create the profile on first save; later saves change only the fields sent"""
    result = await dispatcher.dispatch(UpsertCandidateProfile, caller, **body.fields())
    return to_response(result)


@router.post("/candidate/me/picture")
async def upload_profile_picture(
    file: UploadFile = File(..., description="JPEG, PNG or WebP"),
    caller: CallerIdentity = Depends(get_caller),
    dispatcher: Dispatcher = Depends(dispatcher_dependency),
):
    result = await dispatcher.dispatch(UploadProfilePicture, caller, **await read_upload(file))
    return to_response(result)


@router.post("/candidate/me/cv")
async def upload_cv(
    file: UploadFile = File(..., description="PDF"),
    caller: CallerIdentity = Depends(get_caller),
    dispatcher: Dispatcher = Depends(dispatcher_dependency),
):
    result = await dispatcher.dispatch(UploadCv, caller, **await read_upload(file))
    return to_response(result)


@router.get("/candidates")
async def search_candidates(
    keyword: Optional[str] = Query(None, description="Matches headline, bio and roles"),
    country: Optional[str] = Query(None),
    experience_level: Optional[CandidateLevel] = Query(None, alias="experienceLevel"),
    min_years_of_experience: Optional[int] = Query(None, alias="minYearsOfExperience"),
    open_to_remote: Optional[bool] = Query(None, alias="openToRemote"),
    availability: Optional[AvailabilityStatus] = Query(None),
    page: Optional[int] = Query(None),
    page_size: Optional[int] = Query(None, alias="pageSize"),
    caller: CallerIdentity = Depends(get_caller),
    dispatcher: Dispatcher = Depends(dispatcher_dependency),
):
    """Public profiles only"""
    result = await dispatcher.dispatch(SearchCandidates, caller, **present(
        keyword=keyword,
        country=country,
        experience_level=experience_level,
        min_years_of_experience=min_years_of_experience,
        open_to_remote=open_to_remote,
        availability=availability,
        page=page,
        page_size=page_size,
    ))
    return to_response(result)


@router.get("/candidate/{user_id}")
async def get_candidate_profile(
    user_id: UUID,
    caller: CallerIdentity = Depends(get_caller),
    dispatcher: Dispatcher = Depends(dispatcher_dependency),
):
    result = await dispatcher.dispatch(GetCandidateProfile, caller, user_id=user_id)
    return to_response(result)


# ============================================================================
# Employer profiles
# ============================================================================

@router.get("/employer/me")
async def my_employer_profile(
    caller: CallerIdentity = Depends(get_caller),
    dispatcher: Dispatcher = Depends(dispatcher_dependency),
):
    result = await dispatcher.dispatch(GetMyEmployerProfile, caller)
    return to_response(result)


@router.put("/employer/me")
async def upsert_employer_profile(
    body: EmployerProfileRequest,
    caller: CallerIdentity = Depends(get_caller),
    dispatcher: Dispatcher = Depends(dispatcher_dependency),
):
    result = await dispatcher.dispatch(UpsertEmployerProfile, caller, **body.fields())
    return to_response(result)


@router.post("/employer/me/logo")
async def upload_company_logo(
    file: UploadFile = File(..., description="JPEG, PNG or WebP"),
    caller: CallerIdentity = Depends(get_caller),
    dispatcher: Dispatcher = Depends(dispatcher_dependency),
):
    result = await dispatcher.dispatch(UploadCompanyLogo, caller, **await read_upload(file))
    return to_response(result)


@router.get("/employer/{user_id}")
async def get_employer_profile(
    user_id: UUID,
    caller: CallerIdentity = Depends(get_caller),
    dispatcher: Dispatcher = Depends(dispatcher_dependency),
):
    result = await dispatcher.dispatch(GetEmployerProfile, caller, user_id=user_id)
    return to_response(result)


@router.post("/employer/{user_id}/verify")
async def verify_employer_profile(
    user_id: UUID,
    caller: CallerIdentity = Depends(get_caller),
    dispatcher: Dispatcher = Depends(dispatcher_dependency),
):
    """Admin only"""
    result = await dispatcher.dispatch(VerifyEmployerProfile, caller, user_id=user_id)
    return to_response(result)
