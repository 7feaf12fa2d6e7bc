import logging
import sys

from app.core.config import LOG_LEVEL


def setup_logging(level: str = LOG_LEVEL):
    """Configure application logging."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(
        "%(asctime)s [%(name)s] %(levelname)s: %(message)s"
    ))
    root.handlers = [handler]

    # Suppress noisy loggers
    for name in ["uvicorn.access", "sqlalchemy.engine", "aiosqlite"]:
        logging.getLogger(name).setLevel(logging.WARNING)
