"""
Static Subscription Service
Every candidate is on the configured default plan, with optional per-candidate overrides
"""
from typing import Dict, Optional
from uuid import UUID

from application.services.applications.interfaces import ISubscriptionService
from core.config import settings
from domain.enums import CandidatePlan


class StaticSubscriptionService(ISubscriptionService):
    """Plan lookup without a billing backend"""

    def __init__(
        self,
        default_plan: Optional[CandidatePlan] = None,
        overrides: Optional[Dict[UUID, CandidatePlan]] = None,
    ):
        self.default_plan = default_plan or CandidatePlan(settings.DEFAULT_CANDIDATE_PLAN)
        self.overrides = dict(overrides or {})

    async def get_plan(self, candidate_id: UUID) -> CandidatePlan:
        return self.overrides.get(candidate_id, self.default_plan)
