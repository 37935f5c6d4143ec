"""
Matching API Endpoints
Embedding requests and processing, ranked job and candidate matches
"""
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from application.dispatcher import Dispatcher
from application.identity import CallerIdentity
from application.services.matching.commands import (
    RequestEmbedding,
    ProcessEmbedding,
    GetEmbeddingStatus,
    GetJobMatches,
    GetCandidateMatches,
)
from domain.enums import DocumentType
from presentation.api.v1.dependencies import dispatcher_dependency, get_caller
from presentation.api.v1.responses import to_response
from presentation.api.v1.schemas.common import present
from presentation.api.v1.schemas.matching import EmbeddingRequest


router = APIRouter()


@router.post("/embeddings", status_code=status.HTTP_202_ACCEPTED)
async def request_embedding(
    body: EmbeddingRequest,
    caller: CallerIdentity = Depends(get_caller),
    dispatcher: Dispatcher = Depends(dispatcher_dependency),
):
    """Queue (or re-queue) the caller's profile or an owned job for indexing"""
    result = await dispatcher.dispatch(RequestEmbedding, caller, **body.fields())
    return to_response(result, status.HTTP_202_ACCEPTED)


@router.post("/embeddings/{document_type}/{document_id}/process")
async def process_embedding(
    document_type: DocumentType,
    document_id: UUID,
    caller: CallerIdentity = Depends(get_caller),
    dispatcher: Dispatcher = Depends(dispatcher_dependency),
):
    """Internal: compute and store the vector (admin or ApiUser)"""
    result = await dispatcher.dispatch(
        ProcessEmbedding, caller, document_type=document_type, document_id=document_id
    )
    return to_response(result)


@router.get("/embeddings/{document_type}/{document_id}")
async def embedding_status(
    document_type: DocumentType,
    document_id: UUID,
    caller: CallerIdentity = Depends(get_caller),
    dispatcher: Dispatcher = Depends(dispatcher_dependency),
):
    result = await dispatcher.dispatch(
        GetEmbeddingStatus, caller, document_type=document_type, document_id=document_id
    )
    return to_response(result)


@router.get("/jobs")
async def job_matches(
    page: Optional[int] = Query(None),
    page_size: Optional[int] = Query(None, alias="pageSize"),
    caller: CallerIdentity = Depends(get_caller),
    dispatcher: Dispatcher = Depends(dispatcher_dependency),
):
    """Active jobs ranked against the caller's candidate profile"""
    result = await dispatcher.dispatch(GetJobMatches, caller, **present(page=page, page_size=page_size))
    return to_response(result)


@router.get("/jobs/{job_id}/candidates")
async def candidate_matches(
    job_id: UUID,
    page: Optional[int] = Query(None),
    page_size: Optional[int] = Query(None, alias="pageSize"),
    caller: CallerIdentity = Depends(get_caller),
    dispatcher: Dispatcher = Depends(dispatcher_dependency),
):
    """Public candidate profiles ranked against an owned job"""
    result = await dispatcher.dispatch(
        GetCandidateMatches, caller, job_id=job_id, **present(page=page, page_size=page_size)
    )
    return to_response(result)
