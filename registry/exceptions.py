"""
Error taxonomy surfaced by the API.

Each error carries the HTTP status the app-level handler answers with.
"""


class RegistryError(Exception):
    status_code = 500
    message = 'Internal server error'

    def __init__(self, message: str = None, details: dict = None):
        self.message = message or self.message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self):
        payload = {'success': False, 'error': self.message}
        if self.details:
            payload['details'] = self.details
        return payload


class ValidationError(RegistryError):
    status_code = 400
    message = 'Invalid request'


class UnauthorizedError(RegistryError):
    # Same text for every cause so callers cannot tell a missing session
    # from a deactivated account.
    status_code = 401
    message = 'Authentication required'


class ForbiddenError(RegistryError):
    status_code = 403
    message = 'Admin access required'


class NotFoundError(RegistryError):
    status_code = 404
    message = 'Not found'


class ConflictError(RegistryError):
    status_code = 409
    message = 'Conflict'
