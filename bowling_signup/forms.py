from __future__ import annotations

import re
from typing import List, Optional, Tuple

from .guard import normalize_phone
from .models import Candidate

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MIN_PHONE_DIGITS = 7


def validate_signup(
    name: str, email: str, phone: str, opted_in: Optional[str]
) -> Tuple[Optional[Candidate], List[str]]:
    """Check the public form fields. Returns (candidate, []) or (None, errors)."""
    name = (name or "").strip()
    email = (email or "").strip()
    phone = (phone or "").strip()

    errors: List[str] = []
    if not name:
        errors.append("Please enter your name.")
    if not EMAIL_RE.match(email):
        errors.append("Please enter a valid email address.")
    if len(normalize_phone(phone)) < MIN_PHONE_DIGITS:
        errors.append(f"Please enter a phone number with at least {MIN_PHONE_DIGITS} digits.")
    if errors:
        return None, errors

    checked = str(opted_in or "").strip().lower() in ("on", "true", "1", "yes")
    return Candidate(name=name, email=email, phone=phone, opted_in=checked), []
