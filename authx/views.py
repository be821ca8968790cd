import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from users.directory import participant_from_user
from users.serializers import ParticipantSerializer
from .serializers import LoginSerializer, tokens_for_user

logger = logging.getLogger("cos.auth")


class LoginView(APIView):
    # allow unauthenticated
    permission_classes = []
    authentication_classes = []
    throttle_scope = "login"

    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        if serializer.is_valid():
            user = serializer.validated_data['user']
            logger.info(f"Login: user={user.id}, role={user.role}")
            return Response(
                {
                    **tokens_for_user(user),
                    "user": ParticipantSerializer(participant_from_user(user)).data,
                },
                status=status.HTTP_200_OK
            )
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
