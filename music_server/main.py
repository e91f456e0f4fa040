import logging
import sys
from typing import Optional

import uvicorn
from fastapi import FastAPI

# Use absolute package imports so uvicorn can resolve the module reliably.
from music_server.config import Settings, load_settings
from music_server.routes.core import router as core_router
from music_server.routes.ui import router as ui_router
from music_server.scanner import LibraryScanner

log = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or load_settings()
    if not settings.music_dir.is_dir():
        raise RuntimeError(f"Music directory not found at '{settings.music_dir}'.")

    app = FastAPI(title="Music Server")
    app.state.settings = settings
    app.state.scanner = LibraryScanner(settings.music_dir)
    app.include_router(core_router)
    app.include_router(ui_router)
    return app


def main():
    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        app = create_app(settings)
    except RuntimeError as e:
        log.error("Error: %s", e)
        log.error("Please set the MUSIC_DIR environment variable or create the default ./music directory.")
        sys.exit(1)

    log.info("Music server is running at http://localhost:%d", settings.port)
    log.info("Serving music from: %s", settings.music_dir)
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        timeout_keep_alive=settings.idle_timeout,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
