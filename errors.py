"""
errors.py
---------
Exception hierarchy shared by every layer.
Services raise these; callers decide how to present them to the user.
"""


class BillPilotError(Exception):
    """Base class for all application errors."""


class ValidationError(BillPilotError):
    """
    Invalid input to a create/update operation.

    Attributes:
        field: Name of the offending field, when known.
    """

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class NotFoundError(BillPilotError):
    """A mutation targeted an id that is not in the current collection."""

    def __init__(self, subscription_id: str):
        super().__init__(f"Subscription {subscription_id} not found")
        self.subscription_id = subscription_id


class InvalidRecurrence(BillPilotError):
    """A record carries a recurrence outside Weekly/Monthly/Yearly."""

    def __init__(self, value):
        super().__init__(f"Invalid recurrence: {value!r}")
        self.value = value


class RemoteFailure(BillPilotError):
    """The persistence layer failed to apply an operation."""
