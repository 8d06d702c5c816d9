"""Business-rule failures raised by services and translated once at the HTTP edge."""

from typing import Any


def _describe(attributes: list[tuple[str, Any]]) -> str:
    if len(attributes) == 1:
        name, value = attributes[0]
        return f"{name} {value}"
    return "[" + ", ".join(f"{name}={value}" for name, value in attributes) + "]"


class TaskboardError(Exception):
    """Base class for failures with a defined HTTP status."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(TaskboardError):
    """A referenced record does not exist."""

    status_code = 404

    def __init__(self, object_name: str, attribute: str, value: Any) -> None:
        super().__init__(f"{object_name} with {attribute} {value} not found")
        self.object_name = object_name


class AlreadyExistsError(TaskboardError):
    """A uniqueness rule would be violated."""

    status_code = 409

    def __init__(self, object_name: str, attributes: list[tuple[str, Any]]) -> None:
        super().__init__(f"{object_name} with {_describe(attributes)} already exists")
        self.object_name = object_name
        self.attributes = attributes


class PermissionDeniedError(TaskboardError):
    status_code = 403


class InvalidValueSelectionError(TaskboardError):
    """A value is outside a fixed set of allowed choices."""

    status_code = 400

    def __init__(self, value: str, allowed: list[str]) -> None:
        super().__init__(f'"{value}" is not in the list of valid values: [{", ".join(allowed)}]')
        self.value = value
        self.allowed = allowed


# =============================================================================
# Authentication
# =============================================================================


class AuthHeaderMissingError(TaskboardError):
    status_code = 401

    def __init__(self, message: str = "Authorization header not present") -> None:
        super().__init__(message)


class TokenExpiredError(TaskboardError):
    status_code = 403

    def __init__(self, message: str = "Token has expired") -> None:
        super().__init__(message)


class TokenMalformedError(TaskboardError):
    status_code = 403


class BadCredentialsError(TaskboardError):
    status_code = 403

    def __init__(self, message: str = "Invalid username or password") -> None:
        super().__init__(message)


class AccountLockedError(TaskboardError):
    status_code = 403

    def __init__(self, message: str = "User account is locked") -> None:
        super().__init__(message)


class AccountDisabledError(TaskboardError):
    status_code = 403

    def __init__(self, message: str = "User is disabled") -> None:
        super().__init__(message)


class AccountExpiredError(TaskboardError):
    status_code = 403

    def __init__(self, message: str = "User account has expired") -> None:
        super().__init__(message)


class CredentialsExpiredError(TaskboardError):
    status_code = 403

    def __init__(self, message: str = "User credentials have expired") -> None:
        super().__init__(message)
