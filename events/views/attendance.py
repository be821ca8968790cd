import logging

from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from rest_framework import status

from core.exceptions import LedgerError
from events.ledger import ParticipationLedger
from events.permissions import user_is_elevated
from events.serializers import AttendSerializer, ParticipationSerializer
from .generics import api_error, ledger_error

logger = logging.getLogger('cos.events')


class MarkAttendanceView(APIView):
    """
    POST /api/events/<event_id>/attend/<participant_id>/
    Body (optional): {"points": 25}

    Faculty confirm that a registered participant attended. Students are
    awarded `points` (default 10 when missing or not positive).
    """

    permission_classes = [IsAuthenticated]
    throttle_scope = "attendance"

    def post(self, request, event_id, participant_id):
        marker = request.user

        if not user_is_elevated(marker):
            logger.warning(
                f"Attendance rejected: user={marker.id} is not allowed to mark "
                f"event={event_id}, participant={participant_id}"
            )
            return api_error("Only faculty can mark attendance", status.HTTP_403_FORBIDDEN)

        serializer = AttendSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        try:
            result = ParticipationLedger.mark_attended(
                event_id,
                participant_id,
                award_points=serializer.validated_data.get("points"),
                actor=marker,
            )
        except LedgerError as exc:
            return ledger_error(exc)

        if result.points_awarded:
            message = f"Attendance marked and {result.points_awarded} points awarded"
        else:
            message = "Attendance marked"

        return Response({
            "message": message,
            "points_awarded": result.points_awarded,
            "balance": result.balance,
            "participation": ParticipationSerializer(result.participation).data,
        }, status=status.HTTP_200_OK)
