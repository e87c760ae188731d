# Application Layer
# =================
# Use cases and orchestration: the session registry, the review flow use
# cases, the submission committer and admin settings operations.

from .committer import SubmissionCommitter
from .review_service import ReviewPrompt, ReviewService
from .sessions import SessionRegistry
from .settings_service import SettingsService

__all__ = [
    "ReviewPrompt",
    "ReviewService",
    "SessionRegistry",
    "SettingsService",
    "SubmissionCommitter",
]
