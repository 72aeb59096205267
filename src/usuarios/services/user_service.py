# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, List, Optional

from usuarios.core.errors import DuplicateEmailError, NotFoundError, ValidationError
from usuarios.core.models import UserRecord, parse_age, utc_timestamp
from usuarios.infra.users_repo import UserRepository

log = logging.getLogger(__name__)

# Marker for "field not supplied" (distinct from an explicit None)
UNSET: Any = object()


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _require(name: str, email: str) -> None:
    # Blank check only; stored values keep their exact text.
    if not name.strip() or not email.strip():
        raise ValidationError()


def _records(entries: List[Any]) -> List[UserRecord]:
    return [e for e in entries if isinstance(e, UserRecord)]


def _next_id(records: List[UserRecord]) -> int:
    return max((r.id for r in records), default=0) + 1


class UserStore:
    """CRUD over the full user collection.

    Every operation loads the whole collection from the repository, works on
    an in-memory copy and, for mutations, saves the whole collection back.
    Stored rows that cannot be read as a user are carried through untouched.
    Mutating cycles are serialized by an in-process lock.
    """

    def __init__(self, repo: UserRepository, *, clock: Callable[[], str] = utc_timestamp) -> None:
        self.repo = repo
        self._clock = clock
        self._lock = threading.RLock()

    def _load(self) -> List[Any]:
        """Stored order; each entry is a UserRecord or the raw row as loaded."""
        out: List[Any] = []
        for raw in self.repo.load():
            if not isinstance(raw, dict):
                log.warning("Fila no reconocida conservada: %r", raw)
                out.append(raw)
                continue
            try:
                out.append(UserRecord.from_dict(raw))
            except ValueError as e:
                log.warning("Registro conservado sin modificar: %s", e)
                out.append(raw)
        return out

    def _save(self, entries: List[Any]) -> None:
        self.repo.save([e.to_dict() if isinstance(e, UserRecord) else e for e in entries])

    @staticmethod
    def _email_taken(records: List[UserRecord], email: str, *, except_id: Optional[int] = None) -> bool:
        return any(r.email == email and r.id != except_id for r in records)

    # ------------------ Reads ------------------

    def list(self) -> List[UserRecord]:
        return _records(self._load())

    def find(self, user_id: int) -> Optional[UserRecord]:
        for r in _records(self._load()):
            if r.id == user_id:
                return r
        return None

    def get(self, user_id: int) -> UserRecord:
        r = self.find(user_id)
        if r is None:
            raise NotFoundError()
        return r

    # ------------------ Mutations ------------------

    def create(self, name: Any, email: Any, age: Any = None, photo: Any = None) -> UserRecord:
        name = _text(name)
        email = _text(email)
        _require(name, email)

        with self._lock:
            entries = self._load()
            records = _records(entries)
            if self._email_taken(records, email):
                raise DuplicateEmailError()

            rec = UserRecord(
                id=_next_id(records),
                name=name,
                email=email,
                age=parse_age(age),
                photo=photo or None,
                created_at=self._clock(),
            )
            entries.append(rec)
            self._save(entries)

        log.info("Usuario creado id=%s email=%s", rec.id, rec.email)
        return rec

    def update(self, user_id: int, name: Any, email: Any, age: Any = None, photo: Any = UNSET) -> UserRecord:
        """Replace the mutable fields of a record.

        `id` and `createdAt` never change; `photo` keeps its previous value
        when not supplied (an explicit None clears it).
        """
        name = _text(name)
        email = _text(email)

        with self._lock:
            entries = self._load()
            idx = next(
                (i for i, e in enumerate(entries) if isinstance(e, UserRecord) and e.id == user_id),
                None,
            )
            if idx is None:
                raise NotFoundError()
            _require(name, email)

            current = entries[idx]
            if email != current.email and self._email_taken(_records(entries), email, except_id=current.id):
                raise DuplicateEmailError()

            updated = UserRecord(
                id=current.id,
                name=name,
                email=email,
                age=parse_age(age),
                photo=current.photo if photo is UNSET else photo,
                created_at=current.created_at,
                extra=dict(current.extra),
            )
            entries[idx] = updated
            self._save(entries)

        log.info("Usuario actualizado id=%s", updated.id)
        return updated

    def delete(self, user_id: int) -> None:
        with self._lock:
            entries = self._load()
            remaining = [e for e in entries if not (isinstance(e, UserRecord) and e.id == user_id)]
            if len(remaining) == len(entries):
                raise NotFoundError()
            self._save(remaining)

        log.info("Usuario eliminado id=%s", user_id)
