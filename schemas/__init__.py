"""
Request Pydantic Models

Validation models for JSON request bodies and query strings:
- Problem models (ProblemCreate, ProblemUpdate)
- Learning models (LearningItemCreate, LearningItemUpdate)
- Roadmap models (RoadmapCreate, TopicCreate, SubtopicCreate)
- Revision models (RevisionItemCreate)
- Auth models (RegisterRequest, LoginRequest, GoogleCredentialRequest)
- Analytics models (AnalyticsQuery)
"""

from .problem_models import ProblemCreate, ProblemUpdate
from .learning_models import LearningItemCreate, LearningItemUpdate
from .roadmap_models import RoadmapCreate, TopicCreate, SubtopicCreate
from .revision_models import RevisionItemCreate
from .auth_models import RegisterRequest, LoginRequest, GoogleCredentialRequest
from .analytics_models import AnalyticsQuery

__all__ = [
    'ProblemCreate',
    'ProblemUpdate',
    'LearningItemCreate',
    'LearningItemUpdate',
    'RoadmapCreate',
    'TopicCreate',
    'SubtopicCreate',
    'RevisionItemCreate',
    'RegisterRequest',
    'LoginRequest',
    'GoogleCredentialRequest',
    'AnalyticsQuery'
]
