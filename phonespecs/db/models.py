"""Dataclass models representing DB rows.

These are plain Python objects – not ORM models.  The DB layer serialises /
deserialises to and from these types.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field


@dataclass
class StoredPhone:
    id: str
    manufacturer: str
    model: str
    url: str
    specifications: dict[str, str] = field(default_factory=dict)
    created_at: int = 0

    # ------------------------------------------------------------------
    # Convenience helpers
    # ------------------------------------------------------------------
    def specifications_json(self) -> str:
        """Serialise the specifications dict to a JSON string for storage."""
        return json.dumps(self.specifications, ensure_ascii=False)
