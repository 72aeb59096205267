# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy shared by the store, the auth gate and the HTTP layer.

Each error carries the HTTP status it maps to; the app renders any of them as
``{"error": message}``.
"""

from __future__ import annotations


class UsuariosError(Exception):
    status_code = 500
    default_message = "Error interno"

    def __init__(self, message: str = "") -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(UsuariosError):
    status_code = 400
    default_message = "Nombre y email son requeridos"


class DuplicateEmailError(UsuariosError):
    status_code = 400
    default_message = "El email ya está registrado"


class NotFoundError(UsuariosError):
    status_code = 404
    default_message = "Usuario no encontrado"


class InvalidCredentialsError(UsuariosError):
    status_code = 401
    default_message = "Usuario o contraseña incorrectos"


class UnauthorizedError(UsuariosError):
    status_code = 401
    default_message = "No autorizado"
