"""
Domain Enums
Business enumerations shared across the platform
"""
from enum import Enum
from typing import Optional


class JobType(str, Enum):
    FULL_TIME = "FullTime"
    PART_TIME = "PartTime"
    CONTRACT = "Contract"
    FREELANCE = "Freelance"
    INTERNSHIP = "Internship"


class WorkMode(str, Enum):
    REMOTE = "Remote"
    HYBRID = "Hybrid"
    ON_SITE = "OnSite"


class ExperienceLevel(str, Enum):
    """Seniority asked for by a job posting"""
    JUNIOR = "Junior"
    MID_LEVEL = "MidLevel"
    SENIOR = "Senior"
    LEAD = "Lead"
    PRINCIPAL = "Principal"


class CandidateLevel(str, Enum):
    """Seniority declared on a candidate profile"""
    ENTRY = "Entry"
    JUNIOR = "Junior"
    MID = "Mid"
    SENIOR = "Senior"
    LEAD = "Lead"
    PRINCIPAL = "Principal"
    ARCHITECT = "Architect"


class AvailabilityStatus(str, Enum):
    EMPLOYED = "Employed"
    OPEN_TO_OPPORTUNITIES = "OpenToOpportunities"
    ACTIVELY_LOOKING = "ActivelyLooking"
    NOT_AVAILABLE = "NotAvailable"


class UserRole(str, Enum):
    SUPER_ADMIN = "SuperAdmin"
    MODERATOR = "Moderator"
    EMPLOYER = "Employer"
    HIRING_MANAGER = "HiringManager"
    CANDIDATE = "Candidate"
    KNOWLEDGE_AUTHOR = "KnowledgeAuthor"
    COMMUNITY_MEMBER = "CommunityMember"
    API_USER = "ApiUser"
    GUEST = "Guest"


ADMIN_ROLES = frozenset({UserRole.SUPER_ADMIN, UserRole.MODERATOR})
EMPLOYER_ROLES = frozenset({UserRole.EMPLOYER, UserRole.HIRING_MANAGER})
# Roles a user may not grant themselves at registration
PRIVILEGED_ROLES = ADMIN_ROLES


class AccountStatus(str, Enum):
    ACTIVE = "Active"
    SUSPENDED = "Suspended"
    DELETED = "Deleted"


class NotificationType(str, Enum):
    JOB_MATCH = "JobMatch"
    APPLICATION_STATUS_CHANGED = "ApplicationStatusChanged"
    NEW_MESSAGE = "NewMessage"
    COMMUNITY_MENTION = "CommunityMention"
    SYSTEM_ALERT = "SystemAlert"
    WEEKLY_DIGEST = "WeeklyDigest"
    PROFILE_VIEW = "ProfileView"


class ParseStatus(str, Enum):
    PENDING = "Pending"
    PROCESSING = "Processing"
    COMPLETED = "Completed"
    FAILED = "Failed"


class EnhancementStatus(str, Enum):
    PROCESSING = "Processing"
    COMPLETED = "Completed"
    FAILED = "Failed"


class EmbeddingStatus(str, Enum):
    PENDING = "Pending"
    PROCESSING = "Processing"
    INDEXED = "Indexed"
    FAILED = "Failed"


class DocumentType(str, Enum):
    JOB = "Job"
    CANDIDATE_PROFILE = "CandidateProfile"


class CandidatePlan(str, Enum):
    """Subscription tier; limits are applications per calendar month"""
    FREE = "Free"
    LITE = "Lite"
    PRO = "Pro"
    ENTERPRISE = "Enterprise"

    @property
    def monthly_application_limit(self) -> Optional[int]:
        return {
            CandidatePlan.FREE: 5,
            CandidatePlan.LITE: 20,
        }.get(self)

    @property
    def is_unlimited(self) -> bool:
        return self.monthly_application_limit is None


COMPANY_SIZES = ("1-10", "11-50", "51-200", "201-500", "500+")
