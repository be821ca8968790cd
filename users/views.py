# users/views.py

from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .directory import participant_from_user
from .serializers import ParticipantSerializer


class MeView(APIView):
    """
    GET /api/users/me/
    Return the current participant (student or faculty variant)
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        participant = participant_from_user(request.user)
        return Response(ParticipantSerializer(participant).data)
