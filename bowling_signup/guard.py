from __future__ import annotations

import re
from typing import Iterable, Optional

from .models import Bowler

_NON_DIGIT = re.compile(r"\D")


def normalize_email(email: str) -> str:
    return (email or "").lower()


def normalize_phone(phone: str) -> str:
    """Keep digits only, so "(555) 123-4567" and "555.123.4567" compare equal."""
    return _NON_DIGIT.sub("", phone or "")


def find_duplicate(email: str, phone: str, records: Iterable[Bowler]) -> Optional[Bowler]:
    """
    Return the first record whose normalized email or normalized phone matches.

    Advisory only: `records` is a local snapshot that may lag the stored
    collection, so two near-simultaneous sign-ups can both pass.
    """
    email_key = normalize_email(email)
    phone_key = normalize_phone(phone)
    for r in records:
        if normalize_email(r.email) == email_key or normalize_phone(r.phone) == phone_key:
            return r
    return None


def is_duplicate(email: str, phone: str, records: Iterable[Bowler]) -> bool:
    return find_duplicate(email, phone, records) is not None
