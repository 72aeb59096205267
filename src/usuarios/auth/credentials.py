# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional

import yaml

# Test credentials (plain text on purpose: this backend does no password hashing)
DEFAULT_CREDENTIALS: Dict[str, str] = {
    "admin": "admin123",
    "user": "user123",
}


@dataclass(frozen=True)
class CredentialTable:
    """Static principal -> secret table held in process."""

    secrets: Mapping[str, str]

    def __contains__(self, principal: object) -> bool:
        return isinstance(principal, str) and principal in self.secrets

    def check(self, principal: str, secret: str) -> bool:
        expected = self.secrets.get(principal)
        return expected is not None and expected == secret

    def principals(self) -> list[str]:
        return sorted(self.secrets)


def _read_users_yaml(path: Path) -> dict:
    if not path.exists():
        return {}
    raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    return raw if isinstance(raw, dict) else {}


def load_credentials(path: Optional[Path] = None) -> CredentialTable:
    """Build the credential table.

    Without a path (or with a path that does not exist) the built-in table is
    used. The YAML layout is::

        version: 1
        users:
          admin:
            secret: admin123
            active: true
    """
    if path is None or not Path(path).exists():
        return CredentialTable(secrets=dict(DEFAULT_CREDENTIALS))

    raw = _read_users_yaml(Path(path))
    users = raw.get("users") or {}
    out: Dict[str, str] = {}
    if isinstance(users, dict):
        for uname, udata in users.items():
            if not isinstance(udata, dict):
                continue
            principal = str(uname).strip()
            secret = str(udata.get("secret") or "")
            if not principal or not secret:
                continue
            if not bool(udata.get("active", True)):
                continue
            out[principal] = secret
    return CredentialTable(secrets=out)


def add_credential(path: Path, principal: str, secret: str, *, active: bool = True) -> None:
    """Create or replace one entry in the YAML credential file."""
    principal = (principal or "").strip()
    if not principal:
        raise ValueError("Usuario vacío")
    if not secret:
        raise ValueError("Contraseña vacía")

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    raw = _read_users_yaml(path) or {"version": 1, "users": {}}
    if not isinstance(raw.get("users"), dict):
        raw["users"] = {}

    raw["users"][principal] = {"secret": secret, "active": active}
    path.write_text(yaml.safe_dump(raw, sort_keys=False, allow_unicode=True), encoding="utf-8")
