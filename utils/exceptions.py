"""
utils/exceptions.py

Domain errors raised by routers/services.
middlewares/error_handler.py turns them into the standard error envelope:
    {"success": false, "error": {"code": "...", "message": "..."}}
"""


class AppError(Exception):
    status_code = 400
    code = "BAD_REQUEST"

    def __init__(self, message: str, code: str = None, status_code: int = None, field: str = None):
        super().__init__(message)
        self.message = message
        self.field = field
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code


class NotFoundError(AppError):
    status_code = 404
    code = "NOT_FOUND"


class ConflictError(AppError):
    status_code = 409
    code = "CONFLICT"


class AuthError(AppError):
    status_code = 401
    code = "UNAUTHORIZED"
