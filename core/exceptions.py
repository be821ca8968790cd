from rest_framework.views import exception_handler as drf_exception_handler
from rest_framework.response import Response
from rest_framework import status
import logging

logger = logging.getLogger("cos.core")


# ---- Domain errors ----------------------------------------------------
#
# Expected, user-facing outcomes of the participation ledger and the
# incentive accumulator. Views turn them into {"error": message}.


class LedgerError(Exception):
    """Base class for expected ledger outcomes."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Request could not be completed"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFound(LedgerError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class EventNotFound(NotFound):
    default_message = "Event not found"


class ParticipationNotFound(NotFound):
    default_message = "Participation not found"


class ParticipantNotFound(NotFound):
    default_message = "Participant not found"


class InvalidState(LedgerError):
    default_message = "Invalid state for this action"


class EventInactive(InvalidState):
    default_message = "Event is not active"


class InvalidTransition(InvalidState):
    """
    Participation is not in the status the requested transition needs.

    Reported as 404 because, from the caller's side, there is no
    participation in the required status.
    """

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Participation not found or not in registered state"

    def __init__(self, message=None, current_status=None, target_status=None):
        super().__init__(message)
        self.current_status = current_status
        self.target_status = target_status


class CapacityExceeded(LedgerError):
    default_message = "Event is at full capacity"


class Conflict(LedgerError):
    default_message = "Conflicting request"


class AlreadyRegistered(Conflict):
    default_message = "Already registered for this event"


class Forbidden(LedgerError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "You do not have permission to perform this action"


# ---- DRF exception handler --------------------------------------------


def custom_exception_handler(exc, context):
    """
    Wrap DRF + Django exceptions into a consistent response format.

    Success responses (2xx) are not touched.
    Only errors come through here.
    """
    # Ledger errors that escaped a view keep the plain error shape
    if isinstance(exc, LedgerError):
        return Response({"error": exc.message}, status=exc.status_code)

    response = drf_exception_handler(exc, context)

    # If DRF handled it, wrap it
    if response is not None:
        return Response(
            {
                "success": False,
                "status_code": response.status_code,
                "errors": response.data,
            },
            status=response.status_code,
            headers=_passthrough_headers(response),
        )

    # Unhandled exceptions -> 500
    view = context.get("view")
    logger.exception(
        "Unhandled API exception in %s", view.__class__.__name__ if view else "unknown view",
        exc_info=exc,
    )

    return Response(
        {
            "success": False,
            "status_code": status.HTTP_500_INTERNAL_SERVER_ERROR,
            "errors": {"detail": "Internal server error."},
        },
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def _passthrough_headers(response):
    # Keep auth challenge and throttle hints on the wrapped response
    return {
        name: response[name]
        for name in ("WWW-Authenticate", "Retry-After")
        if response.has_header(name)
    }
