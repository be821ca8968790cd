from core.constants import ROLE_FACULTY, ROLE_STUDENT


def user_is_elevated(user) -> bool:
    """
    Who may manage events (edit metadata, list participants, mark attendance)?
    - faculty
    - superuser
    """
    if not user or not getattr(user, "is_authenticated", False):
        return False

    if getattr(user, "is_superuser", False):
        return True

    return getattr(user, "role", None) == ROLE_FACULTY


def user_is_student(user) -> bool:
    """Incentive points exist only for students."""
    if not user or not getattr(user, "is_authenticated", False):
        return False
    return getattr(user, "role", None) == ROLE_STUDENT
