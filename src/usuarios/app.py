# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import Body, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from usuarios import __version__
from usuarios.auth.credentials import load_credentials
from usuarios.auth.gate import AuthGate
from usuarios.auth.tokens import codec_from_env
from usuarios.config import Settings, load_settings
from usuarios.core.errors import UsuariosError, ValidationError
from usuarios.core.models import KEY_AGE, KEY_EMAIL, KEY_NAME, KEY_PHOTO, parse_id
from usuarios.infra.users_repo import JsonFileUserRepository
from usuarios.permissions import get_gate, get_store, require_principal
from usuarios.services.user_service import UNSET, UserStore

log = logging.getLogger(__name__)


def _as_object(payload: Any) -> Dict[str, Any]:
    return payload if isinstance(payload, dict) else {}


def _user_id(raw: str) -> int:
    uid = parse_id(raw)
    # Non-numeric ids can never match a record
    return uid if uid is not None else -1


def _register_routes(app: FastAPI) -> None:
    # ------------------ Auth ------------------

    @app.post("/api/login")
    def login(payload: Any = Body(None), gate: AuthGate = Depends(get_gate)):
        body = _as_object(payload)
        usuario = body.get("usuario")
        contrasena = body.get("contrasena")
        if not usuario or not contrasena:
            raise ValidationError("Usuario y contraseña requeridos")
        result = gate.login(str(usuario), str(contrasena))
        return {"token": result.token, "usuario": result.principal, "message": "Autenticación exitosa"}

    # ------------------ Users CRUD ------------------

    @app.get("/api/usuarios")
    def list_users(store: UserStore = Depends(get_store), _: str = Depends(require_principal)):
        return [r.to_dict() for r in store.list()]

    @app.get("/api/usuarios/{user_id}")
    def get_user(user_id: str, store: UserStore = Depends(get_store), _: str = Depends(require_principal)):
        return store.get(_user_id(user_id)).to_dict()

    @app.post("/api/usuarios")
    def create_user(
        payload: Any = Body(None),
        store: UserStore = Depends(get_store),
        _: str = Depends(require_principal),
    ):
        body = _as_object(payload)
        rec = store.create(
            name=body.get(KEY_NAME),
            email=body.get(KEY_EMAIL),
            age=body.get(KEY_AGE),
            photo=body.get(KEY_PHOTO),
        )
        return rec.to_dict()

    @app.put("/api/usuarios/{user_id}")
    def update_user(
        user_id: str,
        payload: Any = Body(None),
        store: UserStore = Depends(get_store),
        _: str = Depends(require_principal),
    ):
        body = _as_object(payload)
        rec = store.update(
            _user_id(user_id),
            name=body.get(KEY_NAME),
            email=body.get(KEY_EMAIL),
            age=body.get(KEY_AGE),
            photo=body[KEY_PHOTO] if KEY_PHOTO in body else UNSET,
        )
        return rec.to_dict()

    @app.delete("/api/usuarios/{user_id}")
    def delete_user(user_id: str, store: UserStore = Depends(get_store), _: str = Depends(require_principal)):
        store.delete(_user_id(user_id))
        return {"message": "Usuario eliminado"}


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(UsuariosError)
    async def _usuarios_error(request: Request, exc: UsuariosError):
        return JSONResponse({"error": exc.message}, status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def _request_validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse({"error": "Petición inválida"}, status_code=400)


def create_app(
    *,
    settings: Optional[Settings] = None,
    store: Optional[UserStore] = None,
    gate: Optional[AuthGate] = None,
) -> FastAPI:
    """Build the app. `store` and `gate` default to the JSON file and the
    configured credential table / token codec."""
    settings = settings or load_settings()

    app = FastAPI(title="Usuarios", version=__version__)
    app.state.settings = settings
    app.state.store = store or UserStore(JsonFileUserRepository(settings.db_file))
    app.state.gate = gate or AuthGate(load_credentials(settings.credentials_path), codec_from_env())

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_error_handlers(app)
    _register_routes(app)

    # Front end (optional). Mounted last so the API routes take precedence.
    if settings.static_dir and settings.static_dir.is_dir():
        app.mount("/", StaticFiles(directory=str(settings.static_dir), html=True), name="static")
    elif settings.static_dir:
        log.warning("USUARIOS_STATIC_DIR no existe: %s", settings.static_dir)

    return app


app = create_app()
