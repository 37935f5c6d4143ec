"""ORM Models Package"""

from .user import UserModel, RefreshTokenModel
from .job import JobModel
from .application import ApplicationModel
from .notification import NotificationModel
from .profile import CandidateProfileModel, EmployerProfileModel
from .cv_parse_result import CvParseResultModel
from .enhancement import EnhancementModel
from .embedding import EmbeddingRecordModel

__all__ = [
    "UserModel",
    "RefreshTokenModel",
    "JobModel",
    "ApplicationModel",
    "NotificationModel",
    "CandidateProfileModel",
    "EmployerProfileModel",
    "CvParseResultModel",
    "EnhancementModel",
    "EmbeddingRecordModel",
]
