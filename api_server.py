"""Music Factory API server entry point."""

from __future__ import annotations

import logging
import os
import sys

import uvicorn

from music_factory.api.routes import create_app
from music_factory.services.storage import DataStore

log_level = os.environ.get("LOG_LEVEL", "info").lower()

logging.basicConfig(
    level=log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    stream=sys.stderr,
)
log = logging.getLogger(__name__)


def main() -> None:
    """Run the API server against the configured data directory."""
    store = DataStore()
    app = create_app(store)
    host = os.environ.get("HOST", "0.0.0.0")
    port = int(os.environ.get("PORT", "8000"))
    log.info("Serving on %s:%d, data directory %s", host, port, store.root.resolve())
    uvicorn.run(app, host=host, port=port, log_level=log_level)


if __name__ == "__main__":
    main()
