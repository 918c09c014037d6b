"""Typed errors raised by the service layer.

Every failure of a pairing, exchange, scoring or voting operation is reported
to the caller as one of these. ``main.py`` maps them to HTTP responses.
"""


class ExchangeError(Exception):
    status_code = 400
    kind = "error"

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFound(ExchangeError):
    """A code or record lookup missed."""
    status_code = 404
    kind = "not_found"


class InvalidOperation(ExchangeError):
    """Self-pairing, or a transition attempted from the wrong state."""
    status_code = 400
    kind = "invalid_operation"


class PolicyDenied(ExchangeError):
    """The receiver's preferences (or a role check) refuse the action."""
    status_code = 403
    kind = "policy_denied"


class NotAvailable(ExchangeError):
    """No approved challenge matches a deferred selection."""
    status_code = 422
    kind = "not_available"


class Conflict(ExchangeError):
    """A concurrent pairing, completion or vote won the race."""
    status_code = 409
    kind = "conflict"
