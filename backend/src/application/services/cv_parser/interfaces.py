"""
CV Parser Interfaces
"""
from abc import ABC, abstractmethod

from domain.entities import ParsedCv


class CvExtractionError(Exception):
    """The document could not be read or yielded no usable text"""
    pass


class ICvExtractor(ABC):
    """Turns an uploaded CV into structured fields"""

    @abstractmethod
    async def extract(self, content: bytes, content_type: str) -> ParsedCv:
        """Raises CvExtractionError when nothing can be extracted"""
        pass
