# errors.py
# Client-facing error kinds. Routes raise them; app.py renders {"message": ...}.


class ApiError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MissingInput(ApiError):
    status_code = 400


class InvalidCredentials(ApiError):
    status_code = 401


class AccountBlocked(ApiError):
    status_code = 403


class NotFound(ApiError):
    status_code = 404


class Conflict(ApiError):
    status_code = 409


class PayloadTooLarge(ApiError):
    status_code = 413
