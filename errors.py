"""
Domain errors raised by the service layer.

Each error carries the HTTP status the API answers with; routes decide
the shape of the JSON body.
"""


class AppError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    status_code = 400


class AgeTooLow(ValidationError):
    status_code = 403

    def __init__(self, message: str = "You need to be at least 8 years old to access the website"):
        super().__init__(message)


class AgeTooHigh(ValidationError):
    status_code = 403

    def __init__(self, message: str = "This website is for children aged 8-16"):
        super().__init__(message)


class MissingField(ValidationError):
    status_code = 422


class ConflictError(AppError):
    status_code = 400


class DuplicateNickname(ConflictError):
    def __init__(self, message: str = "User with this nickname already exists"):
        super().__init__(message)


class NotFoundError(AppError):
    status_code = 404


class StoreError(AppError):
    """Unexpected persistence failure; the cause is logged, not returned."""

    status_code = 500
