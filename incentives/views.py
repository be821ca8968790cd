import logging

from django.conf import settings
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from rest_framework import status

from core.constants import LEADERBOARD_MAX_SIZE
from events.ledger import ParticipationLedger
from events.permissions import user_is_student
from events.serializers import ParticipationSerializer
from events.views.generics import api_error
from .accumulator import IncentiveAccumulator

logger = logging.getLogger('cos.incentives')


class MyIncentivesView(APIView):
    """
    GET /api/incentives/me/
    Caller's point balance and the attended participations that earned it.
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        if not user_is_student(request.user):
            return api_error("Incentive points are only for students", status.HTTP_403_FORBIDDEN)

        attended = ParticipationLedger.attended_for(request.user.id)
        return Response({
            "incentive_points": IncentiveAccumulator.balance(request.user.id),
            "participations": ParticipationSerializer(attended, many=True).data,
        })


class LeaderboardView(APIView):
    """
    GET /api/incentives/leaderboard/?limit=10
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        default_size = getattr(settings, "INCENTIVE_LEADERBOARD_SIZE", 10)
        try:
            limit = int(request.query_params.get("limit", default_size))
        except (TypeError, ValueError):
            return api_error("Invalid limit", status.HTTP_400_BAD_REQUEST)

        if limit < 1 or limit > LEADERBOARD_MAX_SIZE:
            return api_error(
                f"limit must be between 1 and {LEADERBOARD_MAX_SIZE}",
                status.HTTP_400_BAD_REQUEST,
            )

        return Response({"leaderboard": IncentiveAccumulator.leaderboard(limit)})
