from .events import (
    EventListCreateView,
    EventDetailView,
    EventParticipantsView,
)
from .participations import (
    ParticipateView,
    MyParticipationsView,
)
from .attendance import MarkAttendanceView
from .generics import api_error
