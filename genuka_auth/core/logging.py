# genuka_auth/core/logging.py
import logging
import logging.config

from genuka_auth.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_configured = False

def setup_logging(level: str | None = None) -> None:
    """Configura o logging raiz uma única vez (uvicorn mantém os próprios handlers)."""
    global _configured
    if _configured:
        return
    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"default": {"format": LOG_FORMAT}},
        "handlers": {
            "console": {"class": "logging.StreamHandler", "formatter": "default"},
        },
        "root": {"level": (level or settings.LOG_LEVEL).upper(), "handlers": ["console"]},
        "loggers": {
            # httpx loga cada request em INFO
            "httpx": {"level": "WARNING"},
        },
    })
    _configured = True
