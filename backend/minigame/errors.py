"""Typed failures raised by the account, score and leaderboard services.

Routes never build error responses for these by hand: the app-level error
handler registered in ``create_app`` renders ``{"error": message}`` with the
exception's ``status_code``.
"""


class ServiceError(Exception):
    status_code = 400
    default_message = 'Bad request'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self):
        return {'error': self.message}


class ValidationError(ServiceError):
    status_code = 400
    default_message = 'Invalid input'


class AuthenticationError(ServiceError):
    status_code = 401
    default_message = 'Authentication required'


class ForbiddenError(ServiceError):
    status_code = 403
    default_message = 'Not allowed for this account'


class NotFoundError(ServiceError):
    status_code = 404
    default_message = 'Not found'


class ConflictError(ServiceError):
    status_code = 409
    default_message = 'Username already taken'


class StorageError(ServiceError):
    # Never carries driver detail; the original exception is logged instead
    status_code = 500
    default_message = 'Internal server error'
