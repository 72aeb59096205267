#!/usr/bin/env python3
from __future__ import annotations

import os
from getpass import getpass
from pathlib import Path

from usuarios.auth.credentials import add_credential

CREDENTIALS_PATH = Path(os.getenv("USUARIOS_CREDENTIALS_PATH", "data/credentials.yml")).resolve()


def main() -> None:
    principal = input("Usuario: ").strip()
    active_in = input("Activo? [Y/n]: ").strip().lower()
    active = (active_in != "n")

    pw1 = getpass("Contraseña: ")
    pw2 = getpass("Repetir contraseña: ")
    if pw1 != pw2:
        raise SystemExit("Las contraseñas no coinciden")

    add_credential(CREDENTIALS_PATH, principal, pw1, active=active)
    print(f"OK -> {CREDENTIALS_PATH}")
    print("Arranca el servidor con USUARIOS_CREDENTIALS_PATH apuntando a este fichero.")


if __name__ == "__main__":
    main()
