# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Whole-collection persistence for user records.

A repository only knows how to load the full list of raw records and how to
save it back; ids, uniqueness and timestamps belong to the store.
"""

from __future__ import annotations

import copy
import json
import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Any, List, Optional, Protocol

log = logging.getLogger(__name__)

# Usually one dict per user; any other JSON value is kept as-is.
Rows = List[Any]

DEFAULT_FILE_MODE = 0o644


class UserRepository(Protocol):
    def load(self) -> Rows: ...

    def save(self, rows: Rows) -> None: ...


class JsonFileUserRepository:
    """A single JSON array on disk, rewritten in full on every save.

    - A missing file is an empty collection.
    - An unreadable or invalid file is also treated as empty (logged).
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(self) -> Rows:
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            log.warning("No se pudo leer %s (%s: %s); se usa colección vacía", self.path, type(e).__name__, e)
            return []
        if not isinstance(data, list):
            log.warning("%s no contiene una lista JSON; se usa colección vacía", self.path)
            return []
        return data

    def _target_mode(self) -> int:
        try:
            return stat.S_IMODE(self.path.stat().st_mode)
        except FileNotFoundError:
            return DEFAULT_FILE_MODE

    def save(self, rows: Rows) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(rows, indent=2, ensure_ascii=False)
        # Write next to the target and swap, so readers never see a partial file.
        fd, tmp = tempfile.mkstemp(prefix=self.path.name + ".", suffix=".tmp", dir=str(self.path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
            os.chmod(tmp, self._target_mode())
            os.replace(tmp, self.path)
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise


class InMemoryUserRepository:
    def __init__(self, rows: Optional[Rows] = None) -> None:
        self._rows: Rows = copy.deepcopy(rows or [])
        self.saves = 0

    def load(self) -> Rows:
        return copy.deepcopy(self._rows)

    def save(self, rows: Rows) -> None:
        self._rows = copy.deepcopy(rows)
        self.saves += 1
