"""Logging setup for the dispatch API."""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)-7s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    # lifespan can run more than once per process (one handler only)
    if not any(getattr(h, "_dispatch_handler", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._dispatch_handler = True
        root.addHandler(handler)
    root.setLevel(level.upper())
