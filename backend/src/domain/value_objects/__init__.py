"""Value Objects - Immutable objects defined by their attributes"""

from .email import Email
from .salary_range import SalaryRange
from .job_status import (
    JobStatus,
    ApplicationStatus,
    APPLICATION_PIPELINE,
    TERMINAL_APPLICATION_STATUSES,
)
from .match_score import MatchScore
__all__ = [
    "Email",
    "SalaryRange",
    "JobStatus",
    "ApplicationStatus",
    "APPLICATION_PIPELINE",
    "TERMINAL_APPLICATION_STATUSES",
    "MatchScore",
]
