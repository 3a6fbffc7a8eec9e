from rest_framework.response import Response

from .exceptions import FleetLedgerError


class DomainErrorMixin:
    """Render domain errors as {"error", "code"} with their HTTP status."""

    def handle_exception(self, exc):
        if isinstance(exc, FleetLedgerError):
            return Response(exc.to_dict(), status=exc.http_status)
        return super().handle_exception(exc)
