"""Error taxonomy shared by services and routes.

Services raise these; ``tableside.main`` maps them to JSON responses of the
form ``{"message": ...}`` with the status code carried by the class.
"""


class AppError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid request data"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class AuthError(AppError):
    status_code = 401
    default_message = "Authentication required"


class InternalError(AppError):
    status_code = 500
