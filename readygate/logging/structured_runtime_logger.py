import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union


class StructuredRuntimeLogger:
    """
    Lightweight JSON-lines logger for gate, source and clock paths.
    """

    def __init__(self, logger: Optional[logging.Logger] = None, name: str = "readygate"):
        self._logger = logger or logging.getLogger(name)

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def emit(self, event_type: str, level: int = logging.INFO, **fields: Any) -> None:
        if not self._logger.isEnabledFor(level):
            return
        payload: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "event_type": event_type,
        }
        payload.update(fields)
        self._logger.log(level, json.dumps(payload, default=str, ensure_ascii=True))

    def warning(self, event_type: str, **fields: Any) -> None:
        self.emit(event_type, level=logging.WARNING, **fields)

    def debug(self, event_type: str, **fields: Any) -> None:
        self.emit(event_type, level=logging.DEBUG, **fields)


def configure_logging(level: Union[str, int, None] = None) -> None:
    """Attaches a stream handler to the readygate logger tree."""
    if level is None:
        from readygate.config.settings import settings
        level = settings.LOG_LEVEL
    root = logging.getLogger("readygate")
    root.setLevel(level.upper() if isinstance(level, str) else level)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s %(message)s"))
        root.addHandler(handler)
