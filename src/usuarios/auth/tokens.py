# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Session token codecs.

Both codecs share one contract: `encode(principal, issued_ms) -> token` and
`decode(token) -> principal`, raising UnauthorizedError when the token cannot
be read. Neither checks whether the principal still exists; the gate does.
"""

from __future__ import annotations

import base64
import binascii
import os
from typing import Optional, Protocol

from itsdangerous import BadSignature, BadTimeSignature, URLSafeTimedSerializer

from usuarios.core.errors import UnauthorizedError

INVALID_TOKEN = "Token inválido"


class TokenCodec(Protocol):
    def encode(self, principal: str, issued_ms: int) -> str: ...

    def decode(self, token: str) -> str: ...


class Base64TokenCodec:
    """base64("{principal}:{issued_ms}"). Reversible, unsigned, no expiry."""

    def encode(self, principal: str, issued_ms: int) -> str:
        return base64.b64encode(f"{principal}:{issued_ms}".encode("utf-8")).decode("ascii")

    def decode(self, token: str) -> str:
        if not token:
            raise UnauthorizedError()
        try:
            text = base64.b64decode(token.encode("ascii")).decode("utf-8")
        except (binascii.Error, ValueError):
            raise UnauthorizedError(INVALID_TOKEN)
        principal = text.split(":", 1)[0]
        if not principal:
            raise UnauthorizedError(INVALID_TOKEN)
        return principal


class SignedTokenCodec:
    """itsdangerous-signed token carrying {"u": principal, "t": issued_ms}.

    `max_age` is in seconds; None means the token never expires.
    """

    def __init__(self, secret_key: str, *, salt: str = "usuarios.session.v1", max_age: Optional[int] = None) -> None:
        if not secret_key:
            raise RuntimeError("Falta SECRET_KEY (o USUARIOS_SECRET_KEY) para tokens firmados")
        self._s = URLSafeTimedSerializer(secret_key=secret_key, salt=salt)
        self.max_age = max_age

    def encode(self, principal: str, issued_ms: int) -> str:
        return self._s.dumps({"u": principal, "t": issued_ms})

    def decode(self, token: str) -> str:
        if not token:
            raise UnauthorizedError()
        try:
            data = self._s.loads(token, max_age=self.max_age)
        except (BadSignature, BadTimeSignature):
            raise UnauthorizedError(INVALID_TOKEN)
        u = str((data or {}).get("u") or "").strip() if isinstance(data, dict) else ""
        if not u:
            raise UnauthorizedError(INVALID_TOKEN)
        return u


def codec_from_env() -> TokenCodec:
    mode = os.getenv("USUARIOS_TOKEN_MODE", "base64").strip().lower()
    if mode == "signed":
        secret = os.getenv("SECRET_KEY") or os.getenv("USUARIOS_SECRET_KEY") or ""
        return SignedTokenCodec(secret)
    if mode != "base64":
        raise RuntimeError(f"USUARIOS_TOKEN_MODE desconocido: {mode!r}")
    return Base64TokenCodec()
