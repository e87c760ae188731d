# Domain Layer
# ============
# Pure review-flow logic: models, the step state machine, the error
# taxonomy and the admin predicate. No Discord, no database.

from .errors import (
    CatalogEmpty,
    NotificationFailure,
    OutOfOrderStep,
    PermissionDenied,
    ReviewBotError,
    SessionExpired,
    StorageFailure,
    ValidationFailed,
)
from .flow import ReviewFlow, parse_product_value, product_value
from .models import GuildSettings, Review, ReviewSession, ReviewStep
from .permissions import is_admin, require_admin

__all__ = [
    "CatalogEmpty",
    "GuildSettings",
    "NotificationFailure",
    "OutOfOrderStep",
    "PermissionDenied",
    "Review",
    "ReviewBotError",
    "ReviewFlow",
    "ReviewSession",
    "ReviewStep",
    "SessionExpired",
    "StorageFailure",
    "ValidationFailed",
    "is_admin",
    "parse_product_value",
    "product_value",
    "require_admin",
]
