"""Domain Entities - Core business objects"""

from .job import Job, JOB_TRANSITIONS
from .application import JobApplication
from .user import UserAccount, RefreshToken
from .notification import Notification
from .cv_parse_result import CvParseResult, ParsedCv, ExtractedCertification, fields_above_threshold
from .enhancement import EnhancementResult, EnhancementOutput, BiasIssue, Improvement
from .embedding import EmbeddingRecord
from .profile import CandidateProfile, EmployerProfile
__all__ = [
    "Job",
    "JOB_TRANSITIONS",
    "JobApplication",
    "UserAccount",
    "RefreshToken",
    "Notification",
    "CvParseResult",
    "ParsedCv",
    "ExtractedCertification",
    "fields_above_threshold",
    "EnhancementResult",
    "EnhancementOutput",
    "BiasIssue",
    "Improvement",
    "EmbeddingRecord",
    "CandidateProfile",
    "EmployerProfile",
]
