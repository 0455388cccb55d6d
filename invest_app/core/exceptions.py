class DomainError(Exception):
    status_code: int = 400
    default_message: str = "Request could not be processed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(DomainError):
    status_code = 400
    default_message = "Invalid request data"


class AuthorizationError(DomainError):
    status_code = 403
    default_message = "Not authorized to perform this action"


class NotFoundError(DomainError):
    status_code = 404
    default_message = "Resource not found"


class InvalidStateError(DomainError):
    status_code = 409
    default_message = "Operation not allowed in the current state"


class ConflictError(DomainError):
    status_code = 409
    default_message = "Resource already exists"
