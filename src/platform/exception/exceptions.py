class CustomBaseError(Exception):
    """Base class for all custom exceptions - controls logging behavior in @Logger.io"""

    def __init__(self, message: str, status_code: int) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class DomainError(CustomBaseError):
    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message, status_code)


class ValidationError(DomainError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 400)


class ForbiddenError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 403)


class NotFoundError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 404)


class AuthenticationError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 401)


# ============================ Collaborator failures ============================


class StoreError(CustomBaseError):
    """Catalog store failure. `step` names the workflow step when re-raised by a use case."""

    def __init__(self, message: str, status_code: int, *, step: str | None = None) -> None:
        self.step = step
        super().__init__(f'{step}: {message}' if step else message, status_code)


class TransientStoreError(StoreError):
    """Retryable (connection, timeout). Only the read path retries it."""

    def __init__(self, message: str, *, step: str | None = None) -> None:
        super().__init__(message, 503, step=step)


class PersistentStoreError(StoreError):
    def __init__(self, message: str, *, step: str | None = None) -> None:
        super().__init__(message, 500, step=step)


class StoreUnavailableError(StoreError):
    """Read gave up: retries exhausted or circuit open, and no fallback applies."""

    def __init__(self, message: str, *, step: str | None = None) -> None:
        super().__init__(message, 503, step=step)


class BlobUploadError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 500)


class DeadlineExceededError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 504)
