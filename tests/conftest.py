import sys
from pathlib import Path as _Path
sys.path.insert(0, str(_Path(__file__).resolve().parents[1] / "src"))

import json
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from usuarios.app import create_app
from usuarios.auth.credentials import CredentialTable, DEFAULT_CREDENTIALS
from usuarios.auth.gate import AuthGate
from usuarios.config import load_settings
from usuarios.infra.users_repo import InMemoryUserRepository, JsonFileUserRepository
from usuarios.services.user_service import UserStore

FIXED_NOW = "2026-01-02T03:04:05.678Z"


@pytest.fixture()
def seed_rows() -> list:
    """Two users with non-contiguous ids (max id is 7)."""
    return [
        {
            "id": 3,
            "nombre": "Ana",
            "email": "ana@example.com",
            "edad": 31,
            "createdAt": "2025-05-01T10:00:00.000Z",
            "foto": None,
        },
        {
            "id": 7,
            "nombre": "Luis",
            "email": "luis@example.com",
            "edad": None,
            "createdAt": "2025-06-01T10:00:00.000Z",
            "foto": "data:image/png;base64,AAAA",
        },
    ]


@pytest.fixture()
def mem_repo(seed_rows) -> InMemoryUserRepository:
    return InMemoryUserRepository(seed_rows)


@pytest.fixture()
def store(mem_repo) -> UserStore:
    return UserStore(mem_repo, clock=lambda: FIXED_NOW)


@pytest.fixture()
def tmp_db(tmp_path: Path, seed_rows) -> Path:
    """A usuarios.json in a temporary directory seeded with `seed_rows`."""
    p = tmp_path / "data" / "usuarios.json"
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(json.dumps(seed_rows, indent=2), encoding="utf-8")
    return p


@pytest.fixture()
def gate() -> AuthGate:
    return AuthGate(CredentialTable(secrets=dict(DEFAULT_CREDENTIALS)), clock_ms=lambda: 1700000000000)


@pytest.fixture()
def client(tmp_db, gate, monkeypatch) -> TestClient:
    monkeypatch.delenv("USUARIOS_STATIC_DIR", raising=False)
    store = UserStore(JsonFileUserRepository(tmp_db), clock=lambda: FIXED_NOW)
    app = create_app(settings=load_settings(), store=store, gate=gate)
    return TestClient(app)


@pytest.fixture()
def auth_headers(client) -> dict:
    r = client.post("/api/login", json={"usuario": "admin", "contrasena": "admin123"})
    assert r.status_code == 200
    return {"Authorization": f"Bearer {r.json()['token']}"}
