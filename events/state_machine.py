# events/state_machine.py
"""
Participation State Machine.

Enforces valid status transitions for a participation record:

            register                 mark_attended
 (none) ───────────────► registered ───────────────► attended (terminal)
                             │  ▲
                      cancel │  │ register (reuse)
                             ▼  │
                         cancelled

Any transition not in VALID_TRANSITIONS is rejected.
"""
from typing import Tuple
import logging

from .models import Participation

logger = logging.getLogger('cos.events')


# Valid state transitions: from_status -> list of allowed to_statuses
VALID_TRANSITIONS = {
    Participation.STATUS_REGISTERED: [Participation.STATUS_ATTENDED, Participation.STATUS_CANCELLED],
    Participation.STATUS_CANCELLED: [Participation.STATUS_REGISTERED],  # Re-registration reuses the row
    Participation.STATUS_ATTENDED: [],
}


def can_transition(participation: Participation, new_status: str) -> Tuple[bool, str]:
    """
    Check if a participation can move to a new status.

    Returns (can_transition: bool, reason: str)
    """
    current_status = participation.status

    if new_status not in dict(Participation.STATUS_CHOICES):
        return False, f"Invalid status: {new_status}"

    allowed = VALID_TRANSITIONS.get(current_status, [])

    if new_status not in allowed:
        return False, f"Cannot transition from '{current_status}' to '{new_status}'"

    return True, ""


def log_transition(participation: Participation, old_status, new_status: str, actor=None) -> None:
    logger.info(
        f"Participation transition: participation={participation.pk}, "
        f"event={participation.event_id}, participant={participation.participant_id}, "
        f"from={old_status or 'none'}, to={new_status}, actor={getattr(actor, 'id', 'unknown')}"
    )


def log_rejected(participation: Participation, new_status: str, reason: str, actor=None) -> None:
    logger.warning(
        f"Invalid participation transition attempted: participation={participation.pk}, "
        f"from={participation.status}, to={new_status}, actor={getattr(actor, 'id', 'unknown')}. "
        f"Reason: {reason}"
    )
