from django.core.cache import cache
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from events.models import Participation
from .helpers import make_event, make_faculty, make_student


class ParticipationApiTests(TestCase):
    def setUp(self):
        cache.clear()

        self.student = make_student("stud")
        self.other = make_student("other")
        self.prof = make_faculty("prof")

        self.client = APIClient()
        self.client.force_authenticate(self.student)

        self.event = make_event(capacity=1)
        self.url = reverse("event-participate", args=[self.event.id])

    def test_register(self):
        r = self.client.post(self.url, {"selected_niche": "coding"}, format="json")

        self.assertEqual(r.status_code, status.HTTP_201_CREATED, r.data)
        self.assertEqual(r.data["message"], "Registered for event successfully")
        self.assertEqual(r.data["participation"]["status"], "registered")
        self.assertEqual(r.data["participation"]["selected_niche"], "coding")
        self.assertEqual(r.data["participation"]["event_name"], self.event.name)

    def test_register_requires_authentication(self):
        r = APIClient().post(self.url, {"selected_niche": "coding"}, format="json")
        self.assertEqual(r.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_register_rejects_unknown_niche(self):
        r = self.client.post(self.url, {"selected_niche": "juggling"}, format="json")

        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(Participation.objects.exists())

    def test_register_unknown_event(self):
        url = reverse("event-participate", args=[999999])
        r = self.client.post(url, {"selected_niche": "coding"}, format="json")

        self.assertEqual(r.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(r.data, {"error": "Event not found"})

    def test_register_inactive_event(self):
        closed = make_event(name="Closed", is_active=False)
        url = reverse("event-participate", args=[closed.id])
        r = self.client.post(url, {"selected_niche": "coding"}, format="json")

        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(r.data, {"error": "Event is not active"})

    def test_register_full_event(self):
        other_client = APIClient()
        other_client.force_authenticate(self.other)
        other_client.post(self.url, {"selected_niche": "coding"}, format="json")

        r = self.client.post(self.url, {"selected_niche": "coding"}, format="json")

        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(r.data, {"error": "Event is at full capacity"})

    def test_register_twice(self):
        self.client.post(self.url, {"selected_niche": "coding"}, format="json")
        r = self.client.post(self.url, {"selected_niche": "gaming"}, format="json")

        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(r.data, {"error": "Already registered for this event"})

    def test_cancel_and_reregister(self):
        first = self.client.post(self.url, {"selected_niche": "coding"}, format="json")

        r = self.client.delete(self.url)
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual(r.data["message"], "Participation cancelled successfully")

        r = self.client.post(self.url, {"selected_niche": "gaming"}, format="json")
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)
        self.assertEqual(r.data["message"], "Re-registered for event successfully")
        self.assertEqual(r.data["participation"]["id"], first.data["participation"]["id"])
        self.assertEqual(r.data["participation"]["selected_niche"], "gaming")

    def test_cancel_without_registration(self):
        r = self.client.delete(self.url)

        self.assertEqual(r.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(r.data, {"error": "Participation not found"})

    def test_cancel_twice(self):
        self.client.post(self.url, {"selected_niche": "coding"}, format="json")
        self.client.delete(self.url)

        r = self.client.delete(self.url)
        self.assertEqual(r.status_code, status.HTTP_404_NOT_FOUND)

    def test_faculty_can_participate(self):
        prof_client = APIClient()
        prof_client.force_authenticate(self.prof)

        r = prof_client.post(self.url, {"selected_niche": "singing"}, format="json")

        self.assertEqual(r.status_code, status.HTTP_201_CREATED)
        self.assertEqual(r.data["participation"]["participant_role"], "faculty")

    def test_my_participations(self):
        second = make_event(name="Second", capacity=5)
        self.client.post(self.url, {"selected_niche": "coding"}, format="json")
        self.client.post(
            reverse("event-participate", args=[second.id]),
            {"selected_niche": "dancing"},
            format="json",
        )
        self.client.delete(reverse("event-participate", args=[second.id]))

        r = self.client.get(reverse("my-participations"))
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual([p["event"] for p in r.data["participations"]], [self.event.id])

        r = self.client.get(reverse("my-participations"), {"include_cancelled": "1"})
        self.assertEqual(len(r.data["participations"]), 2)

    def test_my_participations_only_shows_own(self):
        other_client = APIClient()
        other_client.force_authenticate(self.other)
        other_client.post(self.url, {"selected_niche": "coding"}, format="json")

        r = self.client.get(reverse("my-participations"))
        self.assertEqual(r.data["participations"], [])
