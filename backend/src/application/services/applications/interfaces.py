"""
Application Service Interfaces
"""
from abc import ABC, abstractmethod
from uuid import UUID

from domain.enums import CandidatePlan


class ISubscriptionService(ABC):
    """Resolves the subscription plan a candidate is on"""

    @abstractmethod
    async def get_plan(self, candidate_id: UUID) -> CandidatePlan:
        pass
