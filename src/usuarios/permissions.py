# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from fastapi import Request

from usuarios.auth.gate import AuthGate
from usuarios.services.user_service import UserStore

BEARER_PREFIX = "Bearer "


def bearer_token(request: Request) -> str:
    header = request.headers.get("authorization", "")
    if header.startswith(BEARER_PREFIX):
        return header[len(BEARER_PREFIX):].strip()
    return header.strip()


def get_gate(request: Request) -> AuthGate:
    return request.app.state.gate


def get_store(request: Request) -> UserStore:
    return request.app.state.store


def require_principal(request: Request) -> str:
    """Dependency for protected routes: resolve the bearer token or raise 401."""
    principal = get_gate(request).authenticate(bearer_token(request))
    request.state.usuario = principal
    return principal
