"""
Embedding Record Repository Implementation
Vectors are stored as JSON arrays and ranked in process
"""
from typing import List, Optional
from uuid import UUID

from sqlalchemy import and_, select
from loguru import logger

from core.clock import as_utc
from core.exceptions import DomainException, RepositoryException
from domain.entities import EmbeddingRecord
from domain.enums import DocumentType, EmbeddingStatus
from application.repositories.interfaces import IEmbeddingRepository, IUnitOfWork
from infrastructure.persistence.models.embedding import EmbeddingRecordModel
from .base import SQLAlchemyRepository


class SQLAlchemyEmbeddingRepository(SQLAlchemyRepository, IEmbeddingRepository):
    """SQLAlchemy implementation of the embedding repository"""

    resource_type = "EmbeddingRecord"

    async def get_by_document(
        self, uow: IUnitOfWork, document_id: UUID, document_type: DocumentType
    ) -> Optional[EmbeddingRecord]:
        try:
            result = await self._session(uow).execute(
                select(EmbeddingRecordModel).where(and_(
                    EmbeddingRecordModel.document_id == document_id,
                    EmbeddingRecordModel.document_type == document_type.value,
                ))
            )
            model = result.scalar_one_or_none()
            return self._to_entity(model) if model else None
        except Exception as e:
            logger.error(f"Failed to get embedding for {document_type.value} {document_id}: {str(e)}")
            raise RepositoryException(f"Failed to get embedding: {str(e)}")

    async def add(self, uow: IUnitOfWork, record: EmbeddingRecord) -> EmbeddingRecord:
        session = self._session(uow)
        try:
            session.add(self._to_model(record))
            await self._flush(session)
            return record
        except DomainException:
            raise
        except Exception as e:
            logger.error(f"Failed to create embedding record: {str(e)}")
            raise RepositoryException(f"Failed to create embedding record: {str(e)}")

    async def save(self, uow: IUnitOfWork, record: EmbeddingRecord) -> EmbeddingRecord:
        session = self._session(uow)
        try:
            await self._require_existing(session, EmbeddingRecordModel, record.id)
            await session.merge(self._to_model(record))
            await self._flush(session)
            return record
        except DomainException:
            raise
        except Exception as e:
            logger.error(f"Failed to update embedding record {record.id}: {str(e)}")
            raise RepositoryException(f"Failed to update embedding record: {str(e)}")

    async def list_indexed(self, uow: IUnitOfWork, document_type: DocumentType) -> List[EmbeddingRecord]:
        try:
            result = await self._session(uow).execute(
                select(EmbeddingRecordModel).where(and_(
                    EmbeddingRecordModel.document_type == document_type.value,
                    EmbeddingRecordModel.status == EmbeddingStatus.INDEXED.value,
                ))
            )
            return [self._to_entity(m) for m in result.scalars().all()]
        except Exception as e:
            logger.error(f"Failed to list indexed {document_type.value} embeddings: {str(e)}")
            raise RepositoryException(f"Failed to list embeddings: {str(e)}")

    @staticmethod
    def _to_entity(model: EmbeddingRecordModel) -> EmbeddingRecord:
        return EmbeddingRecord(
            id=model.id,
            document_id=model.document_id,
            document_type=DocumentType(model.document_type),
            status=EmbeddingStatus(model.status),
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at),
            vector=tuple(model.vector) if model.vector is not None else None,
            skills=tuple(model.skills or ()),
            error_message=model.error_message,
            retry_count=model.retry_count or 0,
            last_indexed_at=as_utc(model.last_indexed_at),
            status_changed_at=as_utc(model.status_changed_at),
        )

    @staticmethod
    def _to_model(record: EmbeddingRecord) -> EmbeddingRecordModel:
        return EmbeddingRecordModel(
            id=record.id,
            document_id=record.document_id,
            document_type=record.document_type.value,
            status=record.status.value,
            vector=list(record.vector) if record.vector is not None else None,
            skills=list(record.skills),
            error_message=record.error_message,
            retry_count=record.retry_count,
            last_indexed_at=record.last_indexed_at,
            status_changed_at=record.status_changed_at,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )
