import logging

from django.db import transaction
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from rest_framework import status

from core.exceptions import LedgerError
from events.ledger import ParticipationLedger
from events.models import Event, Participation
from events.permissions import user_is_elevated
from events.serializers import EventSerializer, EventParticipantSerializer
from .generics import api_error, ledger_error, parse_pagination

logger = logging.getLogger('cos.events')


def _my_statuses(user, events):
    """{event_id: status} of the caller's participations for the given events."""
    return dict(
        Participation.objects
        .filter(participant=user, event__in=[e.id for e in events])
        .values_list("event_id", "status")
    )


class EventListCreateView(APIView):
    """
    GET  /api/events/          active events (faculty: ?include_inactive=1 for all)
    POST /api/events/          create an event (faculty only)
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        qs = Event.objects.all()

        include_inactive = request.query_params.get("include_inactive", "")
        if not (user_is_elevated(request.user) and include_inactive.lower() in ("1", "true", "yes")):
            qs = qs.filter(is_active=True)

        niche = request.query_params.get("niche")
        if niche:
            qs = qs.filter(niche=niche)

        search = request.query_params.get("search")
        if search:
            qs = qs.filter(name__icontains=search)

        qs = qs.order_by("date", "id")

        # Get total count before pagination for proper pagination response
        total_count = qs.count()

        pagination = parse_pagination(request)
        if pagination is None:
            return api_error("Invalid pagination params", status.HTTP_400_BAD_REQUEST)
        limit_val, offset_val = pagination

        events = list(ParticipationLedger.with_participant_counts(qs)[offset_val : offset_val + limit_val])

        serializer = EventSerializer(
            events,
            many=True,
            context={"request": request, "my_statuses": _my_statuses(request.user, events)},
        )
        return Response({
            "count": total_count,
            "events": serializer.data,
            "limit": limit_val,
            "offset": offset_val,
        })

    def post(self, request):
        if not user_is_elevated(request.user):
            return api_error("Only faculty can create events", status.HTTP_403_FORBIDDEN)

        serializer = EventSerializer(data=request.data, context={"request": request})
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        event = serializer.save()
        logger.info(f"Event created: event={event.id}, by={request.user.id}")

        return Response(
            {"event": EventSerializer(event, context={"request": request}).data},
            status=status.HTTP_201_CREATED,
        )


class EventDetailView(APIView):
    """
    GET        /api/events/<event_id>/
    PUT/PATCH  /api/events/<event_id>/   (faculty only)
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, event_id):
        event = ParticipationLedger.with_participant_counts(Event.objects.filter(pk=event_id)).first()
        if event is None:
            return api_error("Event not found", status.HTTP_404_NOT_FOUND)

        serializer = EventSerializer(event, context={"request": request})
        return Response({"event": serializer.data})

    def put(self, request, event_id):
        return self._update(request, event_id, partial=False)

    def patch(self, request, event_id):
        return self._update(request, event_id, partial=True)

    def _update(self, request, event_id, partial):
        if not user_is_elevated(request.user):
            return api_error("Only faculty can update events", status.HTTP_403_FORBIDDEN)

        with transaction.atomic():
            # Same lock registration takes, so capacity cannot drop under a racing register
            try:
                event = Event.objects.select_for_update().get(pk=event_id)
            except Event.DoesNotExist:
                return api_error("Event not found", status.HTTP_404_NOT_FOUND)

            serializer = EventSerializer(event, data=request.data, partial=partial, context={"request": request})
            if not serializer.is_valid():
                return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

            new_capacity = serializer.validated_data.get("capacity")
            if new_capacity is not None:
                active_count = ParticipationLedger.count_active(event.pk)
                if new_capacity < active_count:
                    return api_error(
                        f"Capacity cannot be lower than the {active_count} current participants",
                        status.HTTP_400_BAD_REQUEST,
                    )

            event = serializer.save()

        logger.info(f"Event updated: event={event.id}, by={request.user.id}, fields={sorted(serializer.validated_data)}")

        event = ParticipationLedger.with_participant_counts(Event.objects.filter(pk=event.pk)).first()
        return Response({"event": EventSerializer(event, context={"request": request}).data})


class EventParticipantsView(APIView):
    """
    GET /api/events/<event_id>/participants/
    Non-cancelled participants of an event (faculty only).
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, event_id):
        if not user_is_elevated(request.user):
            return api_error("Only faculty can view participants", status.HTTP_403_FORBIDDEN)

        try:
            participations = ParticipationLedger.participants_of(event_id)
        except LedgerError as exc:
            return ledger_error(exc)

        serializer = EventParticipantSerializer(participations, many=True)
        return Response({"participants": serializer.data})
