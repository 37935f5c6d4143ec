"""
CV Parse Result Repository Implementation
Parsed fields are stored as one JSON document
"""
from dataclasses import asdict
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import select
from loguru import logger

from core.clock import as_utc
from core.exceptions import DomainException, RepositoryException
from domain.entities import CvParseResult, ExtractedCertification, ParsedCv
from domain.enums import ParseStatus
from application.repositories.interfaces import CvParseResultSearchFilters, ICvParseResultRepository, IUnitOfWork
from infrastructure.persistence.models.cv_parse_result import CvParseResultModel
from .base import SQLAlchemyRepository


def parsed_to_json(parsed: Optional[ParsedCv]) -> Optional[Dict[str, Any]]:
    return asdict(parsed) if parsed is not None else None


def parsed_from_json(data: Optional[Dict[str, Any]]) -> Optional[ParsedCv]:
    if not data:
        return None
    data = dict(data)
    for key in ("skills", "servicenow_versions"):
        data[key] = tuple(data.get(key) or ())
    data["certifications"] = tuple(ExtractedCertification(**c) for c in data.get("certifications") or ())
    data["field_confidences"] = dict(data.get("field_confidences") or {})
    return ParsedCv(**data)


class SQLAlchemyCvParseResultRepository(SQLAlchemyRepository, ICvParseResultRepository):
    """SQLAlchemy implementation of the CV parse result repository"""

    resource_type = "CvParseResult"

    async def get_by_id(self, uow: IUnitOfWork, result_id: UUID) -> Optional[CvParseResult]:
        try:
            result = await self._session(uow).execute(
                select(CvParseResultModel).where(CvParseResultModel.id == result_id)
            )
            model = result.scalar_one_or_none()
            return self._to_entity(model) if model else None
        except Exception as e:
            logger.error(f"Failed to get CV parse result {result_id}: {str(e)}")
            raise RepositoryException(f"Failed to get CV parse result: {str(e)}")

    async def add(self, uow: IUnitOfWork, result: CvParseResult) -> CvParseResult:
        session = self._session(uow)
        try:
            session.add(self._to_model(result))
            await self._flush(session)
            return result
        except DomainException:
            raise
        except Exception as e:
            logger.error(f"Failed to store CV parse result: {str(e)}")
            raise RepositoryException(f"Failed to store CV parse result: {str(e)}")

    async def save(self, uow: IUnitOfWork, result: CvParseResult) -> CvParseResult:
        session = self._session(uow)
        try:
            await self._require_existing(session, CvParseResultModel, result.id)
            await session.merge(self._to_model(result))
            await self._flush(session)
            return result
        except DomainException:
            raise
        except Exception as e:
            logger.error(f"Failed to update CV parse result {result.id}: {str(e)}")
            raise RepositoryException(f"Failed to update CV parse result: {str(e)}")

    async def search(
        self, uow: IUnitOfWork, filters: CvParseResultSearchFilters, page: int, page_size: int
    ) -> Tuple[List[CvParseResult], int]:
        try:
            query = select(CvParseResultModel).where(CvParseResultModel.user_id == filters.user_id)
            models, total = await self._page(
                self._session(uow),
                query,
                (CvParseResultModel.created_at.desc(), CvParseResultModel.id),
                page,
                page_size,
            )
            return [self._to_entity(m) for m in models], total
        except Exception as e:
            logger.error(f"Failed to list CV parse results for {filters.user_id}: {str(e)}")
            raise RepositoryException(f"Failed to list CV parse results: {str(e)}")

    @staticmethod
    def _to_entity(model: CvParseResultModel) -> CvParseResult:
        return CvParseResult(
            id=model.id,
            user_id=model.user_id,
            blob_path=model.blob_path,
            original_file_name=model.original_file_name,
            content_type=model.content_type,
            file_size_bytes=model.file_size_bytes,
            status=ParseStatus(model.status),
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at),
            error_message=model.error_message,
            parsed=parsed_from_json(model.parsed_data),
            is_applied=model.is_applied,
            applied_at=as_utc(model.applied_at),
            status_changed_at=as_utc(model.status_changed_at),
        )

    @staticmethod
    def _to_model(result: CvParseResult) -> CvParseResultModel:
        return CvParseResultModel(
            id=result.id,
            user_id=result.user_id,
            blob_path=result.blob_path,
            original_file_name=result.original_file_name,
            content_type=result.content_type,
            file_size_bytes=result.file_size_bytes,
            status=result.status.value,
            error_message=result.error_message,
            parsed_data=parsed_to_json(result.parsed),
            overall_confidence=result.overall_confidence,
            is_applied=result.is_applied,
            applied_at=result.applied_at,
            status_changed_at=result.status_changed_at,
            created_at=result.created_at,
            updated_at=result.updated_at,
        )
