"""Errors raised by backend adapters.

Adapters translate client-library exceptions into these so the views never
depend on a particular backend's error types.
"""


class BackendError(Exception):
    """A backend call failed (network, permission or constraint)."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code


class UniqueViolationError(BackendError):
    """An insert hit a uniqueness constraint."""

    POSTGRES_CODE = "23505"

    def __init__(self, message: str) -> None:
        super().__init__(message, code=self.POSTGRES_CODE)


class AuthenticationError(BackendError):
    """Credentials were rejected by the auth subsystem."""


class AdminCredentialsMissing(BackendError):
    """An admin-only operation was attempted without a service-role credential."""

    def __init__(self) -> None:
        super().__init__("Service-role credential is not configured")
