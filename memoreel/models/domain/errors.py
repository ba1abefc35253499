"""
Domain errors raised by the repositories.

Storage failures are classified at the repository boundary (affected-row
counts, unique violations) into the kinds below. Anything else reaches the
caller as memoreel.db.helpers.DatabaseError.

Callers can catch either the generic kind (NotFoundError, NotUpdatedError,
...) or the aggregate-specific one (ReelNotFoundError, ...).
"""


class RepositoryError(Exception):
    """Base class for classified repository failures."""

    default_message = "repository operation failed"

    def __init__(self, message: str | None = None, **context):
        super().__init__(message or self.default_message)
        self.context = context


class NotFoundError(RepositoryError):
    default_message = "record not found"


class NotCreatedError(RepositoryError):
    """Reserved; inserts currently fail with DatabaseError instead."""

    default_message = "record could not be created"


class NotUpdatedError(RepositoryError):
    default_message = "record could not be updated"


class NotDeletedError(RepositoryError):
    default_message = "record could not be deleted"


# Users


class UserNotFoundError(NotFoundError):
    default_message = "user not found"


class UserNotCreatedError(NotCreatedError):
    default_message = "user could not be created"


class UserNotUpdatedError(NotUpdatedError):
    default_message = "user could not be updated"


class UserNotDeletedError(NotDeletedError):
    default_message = "user could not be deleted"


class DuplicateEmailError(RepositoryError):
    default_message = "a user with this email already exists"


# Videos


class VideoNotFoundError(NotFoundError):
    default_message = "video not found"


class VideoNotCreatedError(NotCreatedError):
    default_message = "video could not be created"


class VideoNotUpdatedError(NotUpdatedError):
    default_message = "video could not be updated"


class VideoNotDeletedError(NotDeletedError):
    default_message = "video could not be deleted"


# Reels and their recipients


class ReelNotFoundError(NotFoundError):
    default_message = "reel not found"


class ReelNotCreatedError(NotCreatedError):
    default_message = "reel could not be created"


class ReelNotUpdatedError(NotUpdatedError):
    default_message = "reel could not be updated"


class ReelNotDeletedError(NotDeletedError):
    default_message = "reel could not be deleted"


class RecipientNotFoundError(NotFoundError):
    default_message = "recipient not found"


class RecipientsNotAddedError(NotUpdatedError):
    default_message = "reel recipients could not be added"


class RecipientNotDeletedError(NotDeletedError):
    default_message = "reel recipient could not be deleted"
