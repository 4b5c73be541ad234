"""Application-level exceptions."""


class AppError(Exception):
    """Base exception for application errors."""

    def __init__(self, message: str, code: str = "APP_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class ValidationError(AppError):
    """Raised when input validation fails."""

    def __init__(self, message: str):
        super().__init__(message, code="VALIDATION_ERROR")


class NotFoundError(AppError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        super().__init__(f"{resource} not found: {identifier}", code="NOT_FOUND")


class LastAccountError(AppError):
    """Raised when attempting to delete an owner's only account."""

    def __init__(self, account_id: str):
        super().__init__(
            f"Cannot delete account {account_id}: an owner must keep at least one account",
            code="LAST_ACCOUNT",
        )


class StoreError(AppError):
    """Raised when the remote store rejects or fails an operation."""

    def __init__(self, message: str):
        super().__init__(message, code="STORE_ERROR")


class CacheInvalidError(AppError):
    """Raised when a cached snapshot is malformed and must be discarded."""

    def __init__(self, message: str):
        super().__init__(message, code="CACHE_INVALID")


class ImportPayloadError(AppError):
    """Raised when an import payload is malformed or of an unsupported shape."""

    def __init__(self, message: str):
        super().__init__(message, code="IMPORT_INVALID")


class SyncStateError(AppError):
    """Raised when portfolio state is requested before it has been loaded."""

    def __init__(self, message: str):
        super().__init__(message, code="NOT_READY")
