from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class Candidate:
    """A sign-up that has not been written yet (no id)."""

    name: str
    email: str
    phone: str
    opted_in: bool

    def to_document(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "opted_in": self.opted_in,
        }


@dataclass(frozen=True)
class Bowler:
    id: str
    name: str
    email: str
    phone: str
    opted_in: bool
    created_at: str = ""

    @classmethod
    def from_document(cls, doc_id: str, data: Dict[str, Any]) -> "Bowler":
        return cls(
            id=doc_id,
            name=str(data.get("name", "")),
            email=str(data.get("email", "")),
            phone=str(data.get("phone", "")),
            opted_in=bool(data.get("opted_in", False)),
            created_at=str(data.get("created_at", "")),
        )
