# users/models.py
from django.conf import settings
from django.contrib.auth.models import AbstractUser
from django.db import models

from core.constants import ROLE_CHOICES, ROLE_FACULTY, ROLE_STUDENT


class User(AbstractUser):
    ROLE_STUDENT = ROLE_STUDENT
    ROLE_FACULTY = ROLE_FACULTY
    ROLE_CHOICES = ROLE_CHOICES

    email = models.EmailField(unique=True)
    role = models.CharField(
        max_length=30,
        choices=ROLE_CHOICES,
        default=ROLE_STUDENT,
    )

    class Meta:
        constraints = [
            models.CheckConstraint(
                condition=models.Q(role__in=[ROLE_STUDENT, ROLE_FACULTY]),
                name="user_role_valid",
            ),
        ]

    def __str__(self):
        return self.username

    @property
    def display_name(self):
        return f"{self.first_name} {self.last_name}".strip() or self.username

    @property
    def is_student(self):
        return self.role == ROLE_STUDENT

    @property
    def is_faculty(self):
        return self.role == ROLE_FACULTY


class StudentProfile(models.Model):
    """
    Student-only identity fields.
    Incentive points are NOT stored here; see incentives.IncentiveBalance.
    """
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="student_profile",
    )
    roll_number = models.CharField(max_length=64, unique=True)

    def __str__(self):
        return f"{self.user.username} ({self.roll_number})"


class FacultyProfile(models.Model):
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="faculty_profile",
    )
    employee_id = models.CharField(max_length=64, unique=True)
    department = models.CharField(max_length=255)

    def __str__(self):
        return f"{self.user.username} ({self.employee_id}, {self.department})"
