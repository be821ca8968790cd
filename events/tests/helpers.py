from datetime import date, timedelta

from core.constants import NICHE_CODING
from events.models import Event
from users.models import FacultyProfile, StudentProfile, User


def make_student(username, roll_number=None, **extra):
    user = User.objects.create_user(
        username=username,
        email=f"{username}@example.edu",
        password="pass123",
        role=User.ROLE_STUDENT,
        **extra,
    )
    StudentProfile.objects.create(user=user, roll_number=roll_number or f"R-{username}")
    return user


def make_faculty(username, department="Computer Science", **extra):
    user = User.objects.create_user(
        username=username,
        email=f"{username}@example.edu",
        password="pass123",
        role=User.ROLE_FACULTY,
        **extra,
    )
    FacultyProfile.objects.create(user=user, employee_id=f"E-{username}", department=department)
    return user


def make_event(name="Hack Night", capacity=50, is_active=True, niche=NICHE_CODING, days_ahead=7):
    return Event.objects.create(
        name=name,
        description="An evening of building things",
        niche=niche,
        venue="Main Hall",
        date=date.today() + timedelta(days=days_ahead),
        time="6:00 PM",
        capacity=capacity,
        is_active=is_active,
    )
