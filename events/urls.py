from django.urls import path
from .views import (
    EventListCreateView,
    EventDetailView,
    EventParticipantsView,
    ParticipateView,
    MyParticipationsView,
    MarkAttendanceView,
)

urlpatterns = [
    path("", EventListCreateView.as_view(), name="event-list"),

    # "My" participations (before <int:event_id> routes)
    path("my/participations/", MyParticipationsView.as_view(), name="my-participations"),

    path("<int:event_id>/", EventDetailView.as_view(), name="event-detail"),
    path("<int:event_id>/participants/", EventParticipantsView.as_view(), name="event-participants"),

    # Participation ledger
    path("<int:event_id>/participate/", ParticipateView.as_view(), name="event-participate"),
    path(
        "<int:event_id>/attend/<int:participant_id>/",
        MarkAttendanceView.as_view(),
        name="event-attend",
    ),
]
