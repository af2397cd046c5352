"""User-facing errors raised by the views.

Each carries the single notice message shown to the user and the HTTP status
the API maps it to. Backend detail is logged where the error is raised and
never copied into the message.
"""

from fastapi import status


class StorefrontError(Exception):
    """Base class for errors that end a user action with a negative notice."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationFailed(StorefrontError):
    """Local validation rejected the input; no backend call was made."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY


class BackendFailure(StorefrontError):
    """A backend call failed."""

    status_code = status.HTTP_502_BAD_GATEWAY


class CategoryInUse(StorefrontError):
    """A category still referenced by products cannot be deleted."""

    status_code = status.HTTP_409_CONFLICT

    def __init__(self) -> None:
        super().__init__("Cannot delete category that has products")


class CategoryAlreadyExists(StorefrontError):
    """Inline category creation hit the unique-name constraint."""

    status_code = status.HTTP_409_CONFLICT

    def __init__(self) -> None:
        super().__init__("This category already exists")


class SubmissionInProgress(StorefrontError):
    """The same action is already running for this browser session."""

    status_code = status.HTTP_409_CONFLICT

    def __init__(self) -> None:
        super().__init__("A submission is already in progress")


class InvalidCredentials(StorefrontError):
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self) -> None:
        super().__init__("Invalid email or password")
