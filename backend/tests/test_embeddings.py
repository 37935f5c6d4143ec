"""
Tests for the hashing embedding service
"""
import pytest

from application.services.matching.interfaces import EmbeddingError
from infrastructure.services.embeddings import HashingEmbeddingService


@pytest.fixture
def service():
    return HashingEmbeddingService(dimensions=256)


class TestHashingEmbeddingService:

    @pytest.mark.asyncio
    async def test_vector_is_normalised(self, service):
        vector = await service.embed("ServiceNow ITSM developer with Flow Designer")
        assert len(vector) == 256
        assert sum(v * v for v in vector) == pytest.approx(1.0, rel=1e-5)

    @pytest.mark.asyncio
    async def test_related_text_ranks_higher(self, service):
        job = await service.embed("ServiceNow ITSM developer Flow Designer CMDB")
        close = await service.embed("ITSM developer experienced with CMDB and Flow Designer")
        far = await service.embed("Pastry chef specialising in French desserts")

        scores = service.similarities(job, [close, far])
        assert scores[0] > scores[1]

    @pytest.mark.asyncio
    async def test_empty_document_is_rejected(self, service):
        with pytest.raises(EmbeddingError):
            await service.embed("   ")

    def test_no_candidates(self, service):
        assert service.similarities([1.0, 0.0], []) == []
