import logging

from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from rest_framework import status

from core.exceptions import LedgerError
from events.ledger import ParticipationLedger
from events.serializers import ParticipateSerializer, ParticipationSerializer
from .generics import ledger_error

logger = logging.getLogger('cos.events')


class ParticipateView(APIView):
    """
    POST   /api/events/<event_id>/participate/   body: {"selected_niche": "coding"}
    DELETE /api/events/<event_id>/participate/
    """
    permission_classes = [IsAuthenticated]
    throttle_scope = "participation"

    def post(self, request, event_id):
        serializer = ParticipateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        user = request.user
        try:
            participation, created = ParticipationLedger.register(
                event_id=event_id,
                participant_id=user.id,
                participant_role=user.role,
                selected_niche=serializer.validated_data["selected_niche"],
                actor=user,
            )
        except LedgerError as exc:
            logger.info(f"Registration rejected: user={user.id}, event={event_id}, reason={exc.message}")
            return ledger_error(exc)

        message = (
            "Registered for event successfully"
            if created
            else "Re-registered for event successfully"
        )
        return Response(
            {
                "message": message,
                "participation": ParticipationSerializer(participation).data,
            },
            status=status.HTTP_201_CREATED,
        )

    def delete(self, request, event_id):
        try:
            ParticipationLedger.cancel(event_id, request.user.id, actor=request.user)
        except LedgerError as exc:
            return ledger_error(exc)

        return Response({"message": "Participation cancelled successfully"})


class MyParticipationsView(APIView):
    """
    GET /api/events/my/participations/
    Caller's registered and attended participations (?include_cancelled=1 for all).
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        include_cancelled = request.query_params.get("include_cancelled", "").lower() in ("1", "true", "yes")
        participations = ParticipationLedger.for_participant(
            request.user.id,
            include_cancelled=include_cancelled,
        )
        return Response({
            "participations": ParticipationSerializer(participations, many=True).data,
        })
