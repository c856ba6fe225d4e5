"""Error taxonomy shared by the bot and the site API."""


class ShowcaseError(Exception):
    """Base error carrying a message that is safe to show to a bot user."""

    user_message = "❌ Something went wrong. Please try again."

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail or self.user_message)


class PermissionDenied(ShowcaseError):
    """Raised when a user lacks the role required for an action."""

    user_message = "⛔ You don't have permission to do that."


class InvalidRole(ShowcaseError):
    """Raised when a role name is not one of the known roles."""

    user_message = "❌ Unknown role. Use content_manager or admin."


class UnsupportedMediaType(ShowcaseError):
    """Raised when an uploaded document is not a PDF."""

    user_message = "❌ Please send a PDF file."


class DownloadError(ShowcaseError):
    """Raised when a file cannot be fetched from the messaging platform."""

    user_message = "❌ Couldn't download that file. Please try again."


class StorageWriteError(ShowcaseError):
    """Raised when an object upload fails."""

    user_message = "❌ Error uploading the file. Please try again."


class StorageReadError(ShowcaseError):
    """Raised when an object cannot be read or signed."""

    user_message = "❌ Couldn't access the stored file."


class CatalogWriteError(ShowcaseError):
    """Raised when a showcase record cannot be written."""

    user_message = "❌ Error saving the showcase item. Please try again."


class CatalogReadError(ShowcaseError):
    """Raised when showcase records cannot be listed."""

    user_message = "❌ Error retrieving showcase items."


class IntakeWriteError(ShowcaseError):
    """Raised when publishing fails; the session stays open for a retry."""

    user_message = (
        "❌ Couldn't publish the item. Send the description again to retry, "
        "or /cancel to stop."
    )


class NoActiveSession(ShowcaseError):
    """Raised when a message needs an intake session and none is open."""

    user_message = (
        "💡 Send a PDF file to add new student work, or use /help for commands."
    )


class ApplicationValidationError(ShowcaseError):
    """Raised when an application form is missing required fields."""

    user_message = "Missing required fields"


class CaptchaRequired(ShowcaseError):
    """Raised when an application form has no CAPTCHA token."""

    user_message = "CAPTCHA verification is required."


class CaptchaFailed(ShowcaseError):
    """Raised when a CAPTCHA token does not verify."""

    user_message = "CAPTCHA verification failed. Please try again."
