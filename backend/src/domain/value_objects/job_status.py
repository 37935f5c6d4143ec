"""
Job Status Enums
Status enumerations for jobs and applications
"""
from enum import Enum


class JobStatus(str, Enum):
    """Job posting lifecycle"""
    DRAFT = "Draft"
    ACTIVE = "Active"
    PAUSED = "Paused"
    CLOSED = "Closed"


class ApplicationStatus(str, Enum):
    """Job application lifecycle"""
    APPLIED = "Applied"
    SCREENING = "Screening"
    INTERVIEW = "Interview"
    OFFER = "Offer"
    HIRED = "Hired"
    REJECTED = "Rejected"
    WITHDRAWN = "Withdrawn"


# Forward pipeline order; Rejected and Withdrawn sit outside it
APPLICATION_PIPELINE = (
    ApplicationStatus.APPLIED,
    ApplicationStatus.SCREENING,
    ApplicationStatus.INTERVIEW,
    ApplicationStatus.OFFER,
    ApplicationStatus.HIRED,
)

TERMINAL_APPLICATION_STATUSES = frozenset({
    ApplicationStatus.HIRED,
    ApplicationStatus.REJECTED,
    ApplicationStatus.WITHDRAWN,
})
