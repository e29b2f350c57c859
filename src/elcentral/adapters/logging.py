"""Python logging handler adapter and process logging setup.

The handler bridges the standard library logging module to a LogStoragePort,
so recent diagnostics (unhandled OBIS codes, stream faults) can be read back
from the exporter's /logs endpoint.
"""

import logging
import sys
import traceback

from elcentral.core.models import LogEntry
from elcentral.core.ports import LogStoragePort

# Standard LogRecord attributes that should not be treated as extra fields
_STANDARD_LOGRECORD_ATTRS = frozenset(
    {
        "args",
        "asctime",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "message",
        "module",
        "msecs",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "taskName",
        "thread",
        "threadName",
    }
)

_DEFAULT_INCLUDE_ATTRS = ["module", "funcName", "lineno"]

CONSOLE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


class LogStorageHandler(logging.Handler):
    """Logging handler that writes log records to a LogStoragePort.

    Example:
        ```python
        storage = RingBufferLogStorage(max_size=1000)
        logging.getLogger("elcentral").addHandler(LogStorageHandler(storage))
        ```
    """

    def __init__(
        self,
        storage: LogStoragePort,
        include_attrs: list[str] | None = None,
        level: int = logging.NOTSET,
    ) -> None:
        """Initialize the handler with a log storage backend.

        Args:
            storage: Storage adapter implementing LogStoragePort.
            include_attrs: List of LogRecord attributes to include. Defaults to
                ["module", "funcName", "lineno"].
            level: Minimum level handled.
        """
        super().__init__(level)
        self._storage = storage
        self._include_attrs = include_attrs or _DEFAULT_INCLUDE_ATTRS

    def to_entry(self, record: logging.LogRecord) -> LogEntry:
        """Convert a LogRecord into a LogEntry."""
        attr_mapping: dict[str, str | int | float | bool] = {
            "module": record.name,
            "funcName": record.funcName or "",
            "lineno": record.lineno,
            "pathname": record.pathname,
        }
        attributes: dict[str, str | int | float | bool] = {
            key: attr_mapping[key] for key in self._include_attrs if key in attr_mapping
        }

        # Extras passed via the logging call
        for key, value in record.__dict__.items():
            if key not in _STANDARD_LOGRECORD_ATTRS and isinstance(
                value, (str, int, float, bool)
            ):
                attributes[key] = value

        if record.exc_info:
            exc_type, exc_value, exc_tb = record.exc_info
            if exc_type is not None:
                attributes["exc_type"] = exc_type.__name__
            if exc_value is not None:
                attributes["exc_message"] = str(exc_value)
            if exc_tb is not None:
                attributes["exc_traceback"] = "".join(
                    traceback.format_exception(exc_type, exc_value, exc_tb)
                )

        return LogEntry(
            timestamp=record.created,
            level=record.levelname,
            message=record.getMessage(),
            attributes=attributes,
        )

    def emit(self, record: logging.LogRecord) -> None:
        """Emit a log record to the storage backend."""
        try:
            self._storage.write(self.to_entry(record))
        except Exception:
            self.handleError(record)


def configure_logging(
    debug: bool,
    storage: LogStoragePort | None = None,
    logger_name: str = "elcentral",
) -> LogStorageHandler | None:
    """Set up console logging and optional capture into a log storage.

    Args:
        debug: Log at DEBUG level instead of INFO.
        storage: Storage receiving records of the application logger.
        logger_name: Logger whose records are captured.

    Returns:
        The installed LogStorageHandler, or None without storage.
    """
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(level=level, format=CONSOLE_FORMAT, stream=sys.stderr)
    logging.getLogger().setLevel(level)

    if storage is None:
        return None
    handler = LogStorageHandler(storage)
    logging.getLogger(logger_name).addHandler(handler)
    return handler
