"""
Review Bot Errors
=================

Every error a user can see carries a `kind` (for rendering) and a
user-facing `message`.
"""

RESTART_HINT = "Please start over with /reviewmenu"


class ReviewBotError(Exception):
    """Base exception for review bot errors."""

    kind = "error"
    default_message = "An error occurred while processing your request."

    def __init__(self, message: str = ""):
        self.message = message or self.default_message
        super().__init__(self.message)


class SessionExpired(ReviewBotError):
    """No in-progress review exists for this user in this guild."""

    kind = "session_expired"
    default_message = f"Review session expired. {RESTART_HINT}"


class ValidationFailed(ReviewBotError):
    """Input outside the accepted contract. The user can correct it."""

    kind = "validation_failed"
    default_message = "That input is not valid."


class OutOfOrderStep(ValidationFailed):
    """Input arrived for a step the session is not currently on."""

    kind = "out_of_order"
    default_message = f"That step of your review is no longer active. {RESTART_HINT}"


class CatalogEmpty(ValidationFailed):
    """The guild has no products configured."""

    kind = "catalog_empty"
    default_message = "No products are configured for this server yet. Please ask an admin to add some."


class PermissionDenied(ReviewBotError):
    """Actor lacks admin rights for a privileged operation."""

    kind = "permission_denied"
    default_message = "You do not have permission to use this command."


class StorageFailure(ReviewBotError):
    """A settings or review store call failed."""

    kind = "storage_failure"
    default_message = "There was an error submitting your review. Please try again later."


class NotificationFailure(ReviewBotError):
    """Announcing a review in the review channel failed. Logged, never shown."""

    kind = "notification_failure"
    default_message = "Could not deliver the review announcement."
