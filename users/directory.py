"""
Participant directory.

Read-only lookup that turns a user id into a tagged participant variant.
The ledger and the accumulator only ever see these variants, never the
profile tables directly.
"""
from dataclasses import dataclass
from typing import Optional, Union

from django.contrib.auth import get_user_model

from core.constants import ROLE_FACULTY, ROLE_STUDENT
from core.exceptions import ParticipantNotFound


@dataclass(frozen=True)
class Student:
    id: int
    name: str
    email: str
    roll_number: Optional[str]

    role = ROLE_STUDENT


@dataclass(frozen=True)
class Faculty:
    id: int
    name: str
    email: str
    employee_id: Optional[str]
    department: Optional[str]

    role = ROLE_FACULTY


Participant = Union[Student, Faculty]


def participant_from_user(user) -> Participant:
    """Build the variant for an already-loaded user."""
    if user.role == ROLE_FACULTY:
        profile = getattr(user, "faculty_profile", None)
        return Faculty(
            id=user.id,
            name=user.display_name,
            email=user.email,
            employee_id=profile.employee_id if profile else None,
            department=profile.department if profile else None,
        )

    profile = getattr(user, "student_profile", None)
    return Student(
        id=user.id,
        name=user.display_name,
        email=user.email,
        roll_number=profile.roll_number if profile else None,
    )


def get_participant(participant_id) -> Participant:
    """
    Resolve a participant by user id.

    Raises ParticipantNotFound for unknown or inactive users.
    """
    User = get_user_model()
    try:
        user = (
            User.objects
            .select_related("student_profile", "faculty_profile")
            .get(pk=participant_id, is_active=True)
        )
    except (User.DoesNotExist, ValueError, TypeError):
        raise ParticipantNotFound()
    return participant_from_user(user)


def is_student(participant: Participant) -> bool:
    return isinstance(participant, Student)
