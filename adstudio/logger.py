# adstudio/logger.py
import logging
import sys
from typing import Optional
from adstudio.config import config

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
# server loggers follow LOG_LEVEL
_SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access", "gunicorn.error", "gunicorn.access")
# transport loggers print request URLs, which may carry ?key=
_TRANSPORT_LOGGERS = ("httpx", "httpcore", "urllib3")
_configured = False

def configure_logging() -> None:
    global _configured
    if _configured:
        return
    level = getattr(logging, config.log_level.upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(_FORMAT))
        root.addHandler(handler)
    for handler in root.handlers:
        handler.setLevel(level)

    for name in _SERVER_LOGGERS:
        logging.getLogger(name).setLevel(level)
    for name in _TRANSPORT_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
    _configured = True

def get_logger(name: Optional[str] = None) -> logging.Logger:
    configure_logging()
    return logging.getLogger(name or "adstudio")
