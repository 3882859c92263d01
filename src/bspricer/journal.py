"""Append-only operation log.

One structured record per engine invocation (operation tag, contract
summary, numeric result), rendered by structlog as ``key=value`` lines and
written to stdout or appended to a text file.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import IO, Optional

import structlog

from .core import OptionContract

__all__ = ["configure_logging", "get_logger", "record", "tail", "parse_line", "clear"]

_sink: Optional[IO[str]] = None


def configure_logging(log_file: Optional[str] = None, level: str = "INFO") -> None:
    """Route structlog output to ``log_file`` (append mode) or stdout."""
    global _sink
    if _sink is not None:
        _sink.close()
        _sink = None

    # None lets PrintLogger pick up sys.stdout at call time
    out = None
    if log_file is not None:
        _sink = out = open(log_file, "a", encoding="utf-8")

    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S"),
            structlog.processors.add_log_level,
            structlog.processors.KeyValueRenderer(
                key_order=["timestamp", "level", "event"], drop_missing=True,
            ),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper())
        ),
        logger_factory=structlog.PrintLoggerFactory(out),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str):
    return structlog.get_logger(name)


logger = get_logger(__name__)


def record(tag: str, contract: Optional[OptionContract], value: float, **meta) -> None:
    """Log one invocation, e.g. ``record("MC", oc, px, n_sims=10_000)``."""
    logger.info(
        "engine_run", op=tag,
        contract=str(contract) if contract is not None else None,
        result=value, **meta,
    )


def tail(path: str, n: Optional[int] = 50) -> list[str]:
    """Last ``n`` lines of the log, or all of them for ``n=None``."""
    p = Path(path)
    if not p.exists():
        return []
    lines = p.read_text(encoding="utf-8").splitlines()
    if n is None:
        return lines
    return lines[-n:] if n > 0 else []


_LINE = re.compile(r"^timestamp='([^']*)' level='([^']*)' (.*)$")


def parse_line(line: str) -> tuple[str, str, str]:
    """Split a rendered record into (timestamp, level, message).

    Lines not written by :func:`configure_logging` come back whole as the
    message with empty timestamp and level.
    """
    m = _LINE.match(line)
    if m is None:
        return "", "", line
    return m.group(1), m.group(2), m.group(3)


def clear(path: str) -> None:
    """Truncate the log file."""
    Path(path).write_text("", encoding="utf-8")
