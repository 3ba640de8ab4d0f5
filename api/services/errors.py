"""Domain errors raised by the subscription engine.

Each carries the HTTP status it maps to; the app-level handler in main.py
renders them. Anything that is not a SubscriptionError is an internal failure.
"""


class SubscriptionError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(SubscriptionError):
    """Malformed or policy-violating input."""


class InvalidDateError(ValidationError):
    def __init__(self, message: str = "Invalid start date"):
        super().__init__(message)


class ConflictError(SubscriptionError):
    """An open subscription already exists, or a concurrent write won."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(SubscriptionError):
    status_code = 404
