"""
Embedding Services
Document vectors for job/candidate matching, compared with cosine similarity
"""
import asyncio
from typing import List, Optional, Sequence

import numpy as np
from sklearn.feature_extraction.text import HashingVectorizer
from sklearn.metrics.pairwise import cosine_similarity

from application.services.matching.interfaces import EmbeddingError, IEmbeddingService
from core.config import settings
from core.logging_config import logger


class CosineSimilarityMixin:
    """Cosine similarity of one vector against many"""

    def similarities(self, query: Sequence[float], candidates: Sequence[Sequence[float]]) -> List[float]:
        if not candidates:
            return []
        query_vector = np.asarray(query, dtype=np.float32).reshape(1, -1)
        matrix = np.asarray(candidates, dtype=np.float32)
        return [float(s) for s in cosine_similarity(query_vector, matrix)[0]]


class HashingEmbeddingService(CosineSimilarityMixin, IEmbeddingService):
    """Stateless hashed bag of words and bigrams; no model download needed"""

    def __init__(self, dimensions: Optional[int] = None):
        self.dimensions = dimensions or settings.EMBEDDING_DIMENSIONS
        self.vectorizer = HashingVectorizer(
            n_features=self.dimensions,
            ngram_range=(1, 2),
            alternate_sign=False,
            norm="l2",
            lowercase=True,
        )

    async def embed(self, text: str) -> List[float]:
        if not text or not text.strip():
            raise EmbeddingError("Nothing to embed: the document is empty.")
        vector = self.vectorizer.transform([text]).toarray()[0]
        return [float(v) for v in vector]


class SentenceTransformerEmbeddingService(CosineSimilarityMixin, IEmbeddingService):
    """Dense sentence embeddings from a sentence-transformers model"""

    def __init__(self, model_name: Optional[str] = None):
        from sentence_transformers import SentenceTransformer

        model_name = model_name or settings.AI_MODEL_NAME
        logger.info(f"Loading sentence transformer model: {model_name}")
        self.model = SentenceTransformer(model_name)
        logger.info("Sentence transformer model loaded successfully")

    async def embed(self, text: str) -> List[float]:
        if not text or not text.strip():
            raise EmbeddingError("Nothing to embed: the document is empty.")
        try:
            vector = await asyncio.to_thread(self.model.encode, text, convert_to_numpy=True)
        except RuntimeError as e:
            logger.error(f"Error generating embedding: {e}")
            raise EmbeddingError(f"The embedding model failed: {e}") from e
        return [float(v) for v in vector]


def create_embedding_service() -> IEmbeddingService:
    """Backend chosen by EMBEDDING_BACKEND"""
    if settings.EMBEDDING_BACKEND == "sentence-transformers":
        return SentenceTransformerEmbeddingService()
    logger.info(f"Embeddings: hashing vectorizer ({settings.EMBEDDING_DIMENSIONS} dimensions)")
    return HashingEmbeddingService()
