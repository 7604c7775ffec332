# File: freshlink/core/logging.py

import logging

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """
    Configure root logging once for the API process.

    Uvicorn installs its own handlers; we only make sure our package
    loggers have somewhere to go when the app runs under TestClient
    or a bare ASGI server.
    """
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format=LOG_FORMAT)

    logging.getLogger("freshlink").setLevel(getattr(logging, level.upper(), logging.INFO))
