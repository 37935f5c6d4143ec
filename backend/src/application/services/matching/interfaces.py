"""
Matching Interfaces
"""
from abc import ABC, abstractmethod
from typing import List, Sequence


class EmbeddingError(Exception):
    """The embedding backend could not vectorise a document"""
    pass


class IEmbeddingService(ABC):
    """Embeds documents and compares the resulting vectors"""

    @abstractmethod
    async def embed(self, text: str) -> List[float]:
        """Raises EmbeddingError on failure"""
        pass

    @abstractmethod
    def similarities(self, query: Sequence[float], candidates: Sequence[Sequence[float]]) -> List[float]:
        """Cosine similarity of query against each candidate, in order"""
        pass
