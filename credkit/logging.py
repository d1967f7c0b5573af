import logging
import sys
import time
from pathlib import Path

try:
    from pythonjsonlogger.json import JsonFormatter
except ImportError:  # python-json-logger < 3
    from pythonjsonlogger.jsonlogger import JsonFormatter


class UTCJsonFormatter(JsonFormatter):
    converter = time.gmtime


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """
    Configure the root logger once per process.

    Logs go to stdout as JSON lines, or to ``log_file`` when a destination is
    given (the supervisor hands each worker its own file).
    """
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level.upper())

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(log_file, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stdout)
    fmt = "%(asctime)s %(levelname)s %(name)s %(message)s"
    handler.setFormatter(UTCJsonFormatter(fmt))
    root.addHandler(handler)

    logging.getLogger("httpx").setLevel("WARNING")
    logging.getLogger("passlib").setLevel("WARNING")


def flush_logging() -> None:
    for handler in logging.getLogger().handlers:
        handler.flush()


def shutdown_logging() -> None:
    flush_logging()
    logging.shutdown()
