# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

# Wire/storage keys (the JSON file and the REST bodies use the same layout)
KEY_ID = "id"
KEY_NAME = "nombre"
KEY_EMAIL = "email"
KEY_AGE = "edad"
KEY_PHOTO = "foto"
KEY_CREATED_AT = "createdAt"

KNOWN_KEYS = (KEY_ID, KEY_NAME, KEY_EMAIL, KEY_AGE, KEY_CREATED_AT, KEY_PHOTO)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def _leading_int(text: str) -> Optional[int]:
    m = _LEADING_INT.match(text)
    if not m:
        return None
    try:
        return int(m.group(1))
    except ValueError:
        # Beyond the interpreter's int-from-string digit limit
        return None


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """ISO-8601 UTC with millisecond precision and a trailing 'Z'."""
    dt = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_age(value: Any) -> Optional[int]:
    """Coerce a submitted age. Falsy or unparseable values become None.

    Strings are read from their leading digits, so "42 años" -> 42.
    """
    if not value:
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    return _leading_int(str(value))


def parse_id(value: Any) -> Optional[int]:
    """Parse a path/record id the lenient way ("12abc" -> 12)."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    return _leading_int(str(value or ""))


@dataclass(frozen=True)
class UserRecord:
    id: int
    name: str
    email: str
    age: Optional[int] = None
    photo: Optional[str] = None
    created_at: str = ""
    # Keys found in the stored document that this model does not know about.
    extra: Dict[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "UserRecord":
        rid = parse_id(raw.get(KEY_ID))
        if rid is None:
            raise ValueError(f"Registro sin id válido: {raw.get(KEY_ID)!r}")
        return cls(
            id=rid,
            name=str(raw.get(KEY_NAME) or ""),
            email=str(raw.get(KEY_EMAIL) or ""),
            age=parse_age(raw.get(KEY_AGE)),
            photo=raw.get(KEY_PHOTO),
            created_at=str(raw.get(KEY_CREATED_AT) or ""),
            extra={k: v for k, v in raw.items() if k not in KNOWN_KEYS},
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = dict(self.extra)
        out.update(
            {
                KEY_ID: self.id,
                KEY_NAME: self.name,
                KEY_EMAIL: self.email,
                KEY_AGE: self.age,
                KEY_CREATED_AT: self.created_at,
                KEY_PHOTO: self.photo,
            }
        )
        return out
