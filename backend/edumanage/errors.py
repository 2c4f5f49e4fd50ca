"""
Errors raised by the services and turned into JSON responses by the routes.
Each one carries the HTTP status it maps to.
"""


class EduManageError(Exception):
    status_code = 500

    def __init__(self, message, status_code=None, errors=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.errors = list(errors or [])

    def to_dict(self):
        payload = {"message": self.message}
        if self.errors:
            payload["errors"] = self.errors
        return payload


class NotFoundError(EduManageError):
    status_code = 404


class ValidationError(EduManageError):
    status_code = 400

    def __init__(self, errors, message="Validation failed"):
        super().__init__(message, errors=errors)


class NotEditableError(EduManageError):
    status_code = 400


class ConflictError(EduManageError):
    status_code = 409


class AuthenticationError(EduManageError):
    status_code = 401


class AuthorizationError(EduManageError):
    status_code = 403
