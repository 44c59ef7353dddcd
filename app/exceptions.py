"""Domain-specific exceptions with user-ready messages for the soil sensor dashboard."""


class BusinessLogicException(Exception):
    """Base exception class for business logic errors.

    All business logic exceptions include user-ready messages that can be
    displayed directly in the UI without client-side message construction.
    """

    def __init__(self, message: str, error_code: str) -> None:
        self.message = message
        self.error_code = error_code
        super().__init__(message)


class RecordNotFoundException(BusinessLogicException):
    """Exception raised when a requested record is not found."""

    def __init__(self, resource_type: str, identifier: str) -> None:
        message = f"{resource_type} {identifier} was not found"
        super().__init__(message, error_code="RECORD_NOT_FOUND")


class RecordExistsException(BusinessLogicException):
    """Exception raised when attempting to create a record that already exists."""

    def __init__(self, resource_type: str, identifier: str) -> None:
        message = f"{resource_type} for {identifier} already exists"
        super().__init__(message, error_code="RECORD_EXISTS")


class InvalidOperationException(BusinessLogicException):
    """Exception raised when an operation cannot be performed due to business rules."""

    def __init__(self, operation: str, cause: str) -> None:
        self.operation = operation
        self.cause = cause
        message = f"Cannot {operation} because {cause}"
        super().__init__(message, error_code="INVALID_OPERATION")


class ConcurrentUpdateException(BusinessLogicException):
    """Exception raised when a record changed between read and conditional write."""

    def __init__(self, resource_type: str, identifier: str, expected_version: int) -> None:
        self.expected_version = expected_version
        message = (
            f"{resource_type} {identifier} was modified concurrently "
            f"(expected version {expected_version}); reload and try again"
        )
        super().__init__(message, error_code="VERSION_CONFLICT")


class ValidationException(BusinessLogicException):
    """Exception raised when validation fails."""

    def __init__(self, message: str) -> None:
        super().__init__(message, error_code="VALIDATION_FAILED")


class ExternalServiceException(BusinessLogicException):
    """Exception raised when an external service call fails."""

    def __init__(self, operation: str, cause: str) -> None:
        self.operation = operation
        self.cause = cause
        message = f"Cannot {operation} because external service failed: {cause}"
        super().__init__(message, error_code="EXTERNAL_SERVICE_ERROR")


class ServiceUnavailableException(BusinessLogicException):
    """Exception raised when an external service cannot be reached at all."""

    def __init__(self, service: str, cause: str) -> None:
        self.service = service
        self.cause = cause
        message = f"{service} is unavailable: {cause}"
        super().__init__(message, error_code="SERVICE_UNAVAILABLE")
