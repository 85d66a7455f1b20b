"""Domain errors raised by the rule engine and CRUD layer.

Each error carries the HTTP status it maps to; the exception handlers in
``shared.helpers.exception_handler`` turn them into the response envelope.
"""


class LabServiceError(Exception):
    http_status = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(LabServiceError):
    http_status = 400


class NotFoundError(LabServiceError):
    http_status = 404


class AuthorizationError(LabServiceError):
    http_status = 403
