"""usuarios entrypoint.

Run with:
  python -m usuarios
"""

import logging

import uvicorn

from usuarios.config import load_settings


def main() -> None:
    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    log = logging.getLogger("usuarios")
    base = f"http://localhost:{settings.port}"
    log.info("Servidor ejecutándose en %s", base)
    log.info("API REST disponible en %s/api/usuarios", base)
    log.info("Datos en %s", settings.db_file)
    uvicorn.run(
        "usuarios.app:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
