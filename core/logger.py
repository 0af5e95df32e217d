"""BotwireLogger — singleton JSON logger with console and optional rotating file output.

Configures the ``botwire`` logger once. Library modules log through child
loggers (``botwire.client``, ``botwire.transport``, ...) and inherit its
handlers, so every record comes out as one JSON line.
"""

import json
import logging
import os
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Optional


# Attributes every LogRecord carries; anything else on a record came from ``extra``.
_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None))
) | {"message", "asctime"}


class _JsonFormatter(logging.Formatter):
    """One JSON object per record.

    The fixed keys are ``timestamp``, ``level``, ``logger``, ``message``,
    ``module`` and ``func_name``; keys passed through ``extra`` follow, e.g.::

        logger.warning("Bot API rejected request", extra={"api_endpoint": "sendPhoto", "error_code": 400})

    A fixed key is never overwritten by an extra of the same name.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "func_name": record.funcName,
        }
        entry.update(
            (key, value)
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRS and key not in entry
        )
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


class BotwireLogger:
    """Owner of the ``botwire`` logger; the first instantiation wins.

    Usage::

        from core.logger import BotwireLogger

        logger = BotwireLogger.get_logger()
        logger.info("Client ready")
    """

    _instance: Optional["BotwireLogger"] = None

    LOGGER_NAME = "botwire"
    LOG_FILE = "botwire.log"
    MAX_BYTES = 5 * 1024 * 1024
    BACKUP_COUNT = 5

    def __new__(cls, level: int = logging.INFO, log_dir: Optional[str] = None) -> "BotwireLogger":
        if cls._instance is None:
            instance = super().__new__(cls)
            instance.logger = instance._configure(level, log_dir)
            cls._instance = instance
        return cls._instance

    def _configure(self, level: int, log_dir: Optional[str]) -> logging.Logger:
        logger = logging.getLogger(self.LOGGER_NAME)
        logger.setLevel(level)
        if logger.handlers:
            # already configured, e.g. after a module reload
            return logger

        self._attach(logger, logging.StreamHandler(), level)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
            rotating = RotatingFileHandler(
                os.path.join(log_dir, self.LOG_FILE),
                maxBytes=self.MAX_BYTES,
                backupCount=self.BACKUP_COUNT,
                encoding="utf-8",
            )
            self._attach(logger, rotating, level)
        return logger

    @staticmethod
    def _attach(logger: logging.Logger, handler: logging.Handler, level: int) -> None:
        handler.setLevel(level)
        handler.setFormatter(_JsonFormatter())
        logger.addHandler(handler)

    @classmethod
    def get_logger(cls, level: int = logging.INFO, log_dir: Optional[str] = None) -> logging.Logger:
        """Return the shared ``botwire`` logger.

        The first call decides the level and whether a rotating file is
        written; later calls return the same logger unchanged.
        """
        return cls(level, log_dir).logger

    def cleanup(self) -> None:
        """Flush, close and detach every handler."""
        for handler in list(self.logger.handlers):
            handler.flush()
            handler.close()
            self.logger.removeHandler(handler)
