# events/sanitizers.py
"""
Input sanitization and validation for event metadata.

All user-generated text should pass through these functions
before being stored or rendered.
"""
import re
from typing import Optional

from django.utils.html import strip_tags


def sanitize_text(text: Optional[str], max_length: Optional[int] = None, strip: bool = True) -> str:
    """
    Sanitize plain text input.

    - Strips leading/trailing whitespace
    - Removes control characters
    - Enforces maximum length
    - Returns empty string for None input
    """
    if text is None:
        return ""

    if strip:
        text = text.strip()

    # Remove control characters except newlines and tabs
    text = re.sub(r'[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]', '', text)

    if max_length and len(text) > max_length:
        text = text[:max_length]

    return text


def sanitize_title(title: Optional[str]) -> str:
    """
    Sanitize event names and venues.

    - Max 255 characters
    - No HTML
    - Single line (no newlines)
    """
    text = sanitize_text(strip_tags(title or ""), max_length=255)
    text = re.sub(r'\s+', ' ', text)
    return text


def sanitize_description(description: Optional[str]) -> str:
    """
    Event descriptions are plain text: tags are dropped, max 10000 characters.
    """
    return sanitize_text(strip_tags(description or ""), max_length=10000)


# ─────────────────────────────────────────────────────────────
# Numeric Validators
# ─────────────────────────────────────────────────────────────

class ValidationError(Exception):
    """Raised when validation fails."""
    pass


def validate_capacity(value, min_value: int = 1, max_value: int = 100000) -> int:
    """
    Validate event capacity.

    - Must be an integer
    - Must be between min_value and max_value (no "unlimited" events)
    """
    if isinstance(value, bool):
        raise ValidationError("Capacity must be a valid integer")
    try:
        capacity = int(value)
    except (TypeError, ValueError):
        raise ValidationError("Capacity must be a valid integer")

    if capacity < min_value:
        raise ValidationError(f"Capacity must be at least {min_value}")

    if capacity > max_value:
        raise ValidationError(f"Capacity cannot exceed {max_value}")

    return capacity
