# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from usuarios.auth.credentials import CredentialTable
from usuarios.auth.tokens import INVALID_TOKEN, Base64TokenCodec, TokenCodec
from usuarios.core.errors import InvalidCredentialsError, UnauthorizedError

log = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class LoginResult:
    token: str
    principal: str


class AuthGate:
    """Issues tokens at login and resolves them back to a principal.

    There is no server-side session state: a token stays valid for as long as
    its principal is in the credential table.
    """

    def __init__(
        self,
        credentials: CredentialTable,
        codec: Optional[TokenCodec] = None,
        *,
        clock_ms: Callable[[], int] = _now_ms,
    ) -> None:
        self.credentials = credentials
        self.codec = codec or Base64TokenCodec()
        self._clock_ms = clock_ms

    def login(self, principal: str, secret: str) -> LoginResult:
        principal = principal or ""
        if not principal or not secret or not self.credentials.check(principal, secret):
            log.info("Login rechazado para %r", principal)
            raise InvalidCredentialsError()
        token = self.codec.encode(principal, self._clock_ms())
        log.info("Login correcto: %s", principal)
        return LoginResult(token=token, principal=principal)

    def authenticate(self, token: Optional[str]) -> str:
        if not token:
            raise UnauthorizedError()
        principal = self.codec.decode(token)
        if principal not in self.credentials:
            log.warning("Token con usuario desconocido: %r", principal)
            raise UnauthorizedError(INVALID_TOKEN)
        return principal
