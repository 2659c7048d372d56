"""Email address helpers shared by every context that stores addresses."""

import re

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def normalize_email(raw: str) -> str:
    """Emails are stored and compared trimmed and lower-cased."""
    return (raw or "").strip().lower()


def is_valid_email(address: str) -> bool:
    return bool(_EMAIL_PATTERN.match(address or "")) and ".." not in address
