class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(self, message: str, status_code: int = 500, details: dict = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

class ResourceNotFoundError(AppError):
    """Raised when a referenced teacher, class, subject, period or leave request is missing."""
    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(f"{resource_type} with id {resource_id} not found", status_code=404)
        self.resource_type = resource_type
        self.resource_id = resource_id

class AssignmentValidationError(AppError):
    """Raised when a manually chosen substitute breaks one or more assignment rules."""
    def __init__(self, errors: list[str]):
        super().__init__(
            f"Assignment validation failed: {', '.join(errors)}",
            status_code=400,
            details={"errors": list(errors)},
        )
        self.errors = list(errors)

class InvalidStateError(AppError):
    """Raised when a leave request or substitution cannot move to the requested status."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=409, details=details)

class StoreError(AppError):
    """Raised when the record store could not complete a read or write."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=503, details=details)

class ConfigurationError(AppError):
    """Raised when system configuration is invalid."""
    def __init__(self, message: str):
        super().__init__(message, status_code=500)
