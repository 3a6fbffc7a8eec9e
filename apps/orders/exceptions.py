"""
Domain errors shared by the order, fuel and notification apps.
Views map them to HTTP responses via `http_status`.
"""


class FleetLedgerError(Exception):
    code = "error"
    http_status = 400

    def __init__(self, message, code=None, details=None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.details = details or {}

    def to_dict(self):
        payload = {"error": self.message, "code": self.code}
        if self.details:
            payload["details"] = self.details
        return payload


class OrderNotFound(FleetLedgerError):
    code = "order_not_found"
    http_status = 404


class LedgerNotFound(FleetLedgerError):
    code = "ledger_not_found"
    http_status = 404


class NotificationNotFound(FleetLedgerError):
    code = "notification_not_found"
    http_status = 404


class InvalidOrderState(FleetLedgerError):
    """Editing/cancelling a cancelled order, or an SDO sent through a ledger-only operation."""
    code = "invalid_order_state"
    http_status = 409


class InvalidLedgerState(FleetLedgerError):
    code = "invalid_ledger_state"
    http_status = 409


class InvalidNotificationState(FleetLedgerError):
    code = "invalid_notification_state"
    http_status = 409
