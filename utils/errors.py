# utils/errors.py


class AppError(Exception):
    status_code = 500
    message = "Internal server error"

    def __init__(self, message: str | None = None, status_code: int | None = None):
        super().__init__(message or self.message)
        if message:
            self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self):
        return {"message": self.message}


class ValidationError(AppError):
    status_code = 400
    message = "Invalid input"


class Unauthorized(AppError):
    status_code = 401
    message = "Unauthorized"


class InvalidCredentials(Unauthorized):
    message = "Invalid email or password"


class Forbidden(AppError):
    status_code = 403
    message = "Forbidden"


class NotFound(AppError):
    status_code = 404
    message = "Not found"


class Conflict(AppError):
    status_code = 409
    message = "Conflict"


class Internal(AppError):
    status_code = 500
