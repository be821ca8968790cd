from django.urls import path
from .views import MyIncentivesView, LeaderboardView

urlpatterns = [
    path("me/", MyIncentivesView.as_view(), name="incentives-me"),
    path("leaderboard/", LeaderboardView.as_view(), name="incentives-leaderboard"),
]
