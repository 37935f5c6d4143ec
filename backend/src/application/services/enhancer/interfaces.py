"""
Job Enhancer Interfaces
"""
from abc import ABC, abstractmethod
from typing import Optional

from domain.entities import EnhancementOutput


class EnhancementError(Exception):
    """The enhancer could not produce a usable result"""
    pass


class IJobEnhancer(ABC):
    """Rewrites a job description and scores it before and after"""

    @abstractmethod
    async def enhance(self, title: str, description: str, requirements: Optional[str] = None) -> EnhancementOutput:
        """Raises EnhancementError on failure"""
        pass
