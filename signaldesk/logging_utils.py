"""Loguru setup shared by the API, the tests and scripts.

Every record carries ``request_id``, ``environment`` and ``service_version`` so
that a table request can be followed from the middleware through the pipeline
and repository logs. Records are forwarded to stdlib ``logging`` as well, which
is where Sentry's logging integration and pytest's caplog pick them up.
"""

from __future__ import annotations

import logging
import os
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from os import PathLike
from pathlib import Path
from typing import Any, Dict, Iterator, Optional, Union

from loguru import logger

from signaldesk import __version__
from signaldesk.settings import get_app_settings

_TEXT_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<8} | "
    "req={extra[request_id]} | env={extra[environment]} | "
    "ver={extra[service_version]} | {name}:{line} | {message}"
)

_FIELDS: Dict[str, ContextVar[str]] = {
    "request_id": ContextVar("signaldesk_request_id", default="-"),
    "environment": ContextVar("signaldesk_environment", default="local"),
    "service_version": ContextVar("signaldesk_service_version", default=__version__),
}

_configured = False


def _patch_record(record: Dict[str, Any]) -> None:
    extra = record["extra"]
    for key, var in _FIELDS.items():
        extra.setdefault(key, var.get())


def _forward_to_stdlib(message) -> None:
    record = message.record
    exc = record["exception"]
    std_record = logging.LogRecord(
        name=record["name"] or "signaldesk",
        level=record["level"].no,
        pathname=record["file"].path,
        lineno=record["line"],
        msg=record["message"],
        args=(),
        exc_info=(exc.type, exc.value, exc.traceback) if exc else None,
        func=record["function"],
    )
    for key, value in record["extra"].items():
        setattr(std_record, key, value)
    logging.getLogger(std_record.name).handle(std_record)


def _sink_options(level: str) -> Dict[str, Any]:
    return {"level": level, "enqueue": False, "backtrace": False, "diagnose": False}


def setup_logging(*, force: bool = False, level: Optional[str] = None) -> None:
    """
    Route loguru to stdout and to stdlib logging with request metadata attached.

    ``LOG_LEVEL`` picks the level when ``level`` is not given; ``LOG_FORMAT=json``
    switches the stdout sink to loguru's serialized records.
    """
    global _configured
    if _configured and not force:
        return

    log_level = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    environment = get_app_settings().environment
    version = os.getenv("APP_VERSION") or __version__
    _FIELDS["environment"].set(environment)
    _FIELDS["service_version"].set(version)

    logger.remove()
    logger.configure(
        extra={"request_id": "-", "environment": environment, "service_version": version},
        patcher=_patch_record,
    )
    if (os.getenv("LOG_FORMAT") or "").lower() == "json":
        logger.add(sys.stdout, serialize=True, **_sink_options(log_level))
    else:
        logger.add(sys.stdout, format=_TEXT_FORMAT, **_sink_options(log_level))
    logger.add(_forward_to_stdlib, **_sink_options(log_level))

    root = logging.getLogger()
    root.setLevel(getattr(logging, log_level, logging.INFO))
    if not root.handlers:
        root.addHandler(logging.StreamHandler(sys.stdout))
    _configured = True


def setup_test_logging(
    target: Optional[Union[str, PathLike]] = None,
    *,
    level: Optional[str] = None,
    filename: str = "pytest.log",
) -> Optional[Path]:
    """Configure logging for pytest, optionally teeing records into a log file.

    ``target`` may be a file or a directory; a directory gets ``filename``.
    Returns the log file path when one was added.
    """
    effective = (level or os.getenv("PYTEST_LOGLEVEL") or "INFO").upper()
    setup_logging(force=True, level=effective)
    if target is None:
        return None

    path = Path(target)
    if path.is_dir() or str(target).endswith(os.sep):
        path = path / filename
    path.parent.mkdir(parents=True, exist_ok=True)
    logger.add(str(path), format=_TEXT_FORMAT, **_sink_options(effective))
    return path


@contextmanager
def logging_context(**values: str) -> Iterator[None]:
    """Bind structured fields (e.g. ``request_id``) for the enclosed block."""
    tokens = [
        (_FIELDS[key], _FIELDS[key].set(value or "-"))
        for key, value in values.items()
        if key in _FIELDS
    ]
    try:
        with logger.contextualize(**values):
            yield
    finally:
        for var, token in reversed(tokens):
            var.reset(token)


__all__ = ["setup_logging", "setup_test_logging", "logging_context"]
