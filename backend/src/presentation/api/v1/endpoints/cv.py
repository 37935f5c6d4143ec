"""
CV Parser API Endpoints
"""
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Query, UploadFile, status

from application.dispatcher import Dispatcher
from application.identity import CallerIdentity
from application.services.cv_parser.commands import (
    ParseCv,
    GetCvParseResult,
    GetMyCvParseResults,
    ApplyCvParseResult,
)
from presentation.api.v1.dependencies import dispatcher_dependency, get_caller
from presentation.api.v1.responses import to_response
from presentation.api.v1.schemas.common import present, read_upload
from presentation.api.v1.schemas.cv import ApplyCvRequest


router = APIRouter()


@router.post("/parse", status_code=status.HTTP_201_CREATED)
async def parse_cv(
    file: UploadFile = File(..., description="PDF or DOCX"),
    caller: CallerIdentity = Depends(get_caller),
    dispatcher: Dispatcher = Depends(dispatcher_dependency),
):
    """
    Parse an uploaded CV.

    A document that cannot be read still produces a result, with status Failed.
    """
    result = await dispatcher.dispatch(ParseCv, caller, **await read_upload(file))
    return to_response(result, status.HTTP_201_CREATED)


@router.get("/results")
async def my_parse_results(
    page: Optional[int] = Query(None),
    page_size: Optional[int] = Query(None, alias="pageSize"),
    caller: CallerIdentity = Depends(get_caller),
    dispatcher: Dispatcher = Depends(dispatcher_dependency),
):
    result = await dispatcher.dispatch(GetMyCvParseResults, caller, **present(page=page, page_size=page_size))
    return to_response(result)


@router.get("/results/{parse_result_id}")
async def get_parse_result(
    parse_result_id: UUID,
    caller: CallerIdentity = Depends(get_caller),
    dispatcher: Dispatcher = Depends(dispatcher_dependency),
):
    result = await dispatcher.dispatch(GetCvParseResult, caller, parse_result_id=parse_result_id)
    return to_response(result)


@router.post("/results/{parse_result_id}/apply")
async def apply_parse_result(
    parse_result_id: UUID,
    body: Optional[ApplyCvRequest] = None,
    caller: CallerIdentity = Depends(get_caller),
    dispatcher: Dispatcher = Depends(dispatcher_dependency),
):
    """Copy the confident fields onto the caller's candidate profile"""
    fields = body.fields() if body else {}
    result = await dispatcher.dispatch(ApplyCvParseResult, caller, parse_result_id=parse_result_id, **fields)
    return to_response(result)
