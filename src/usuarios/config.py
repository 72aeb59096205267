# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes", "y"}


def _env_path(name: str) -> Optional[Path]:
    v = os.getenv(name, "").strip()
    return Path(v).resolve() if v else None


@dataclass(frozen=True)
class Settings:
    host: str
    port: int
    reload: bool
    db_file: Path
    credentials_path: Optional[Path]
    cors_origins: Tuple[str, ...]
    static_dir: Optional[Path]
    log_level: str


def load_settings() -> Settings:
    """Read the USUARIOS_* environment (token mode is read by the codec factory)."""
    origins = tuple(o.strip() for o in os.getenv("USUARIOS_CORS_ORIGINS", "*").split(",") if o.strip())
    return Settings(
        host=os.getenv("USUARIOS_HOST", "0.0.0.0"),
        port=int(os.getenv("USUARIOS_PORT", "3000")),
        reload=_env_bool("USUARIOS_RELOAD"),
        db_file=Path(os.getenv("USUARIOS_DB_FILE", "usuarios.json")).resolve(),
        credentials_path=_env_path("USUARIOS_CREDENTIALS_PATH"),
        cors_origins=origins or ("*",),
        static_dir=_env_path("USUARIOS_STATIC_DIR"),
        log_level=os.getenv("USUARIOS_LOG_LEVEL", "INFO").upper(),
    )
