# csvio.py
# CSV ingestion / export for option contracts.
#
# Row schema (seven fields, in order):
#     type,S,K,r,sigma,T,q
#     EUROPEAN_CALL,100,100,0.05,0.2,1.0,0.0
# Blank lines and lines starting with '#' are ignored.

from __future__ import annotations
import csv
from pathlib import Path
from typing import Iterator, Sequence

from .core import OptionContract, OptionType
from .journal import get_logger

__all__ = [
    "FIELDS",
    "parse_row",
    "format_row",
    "read_contracts",
    "validate_csv",
    "repair_csv",
    "write_results",
    "write_log_summary",
    "write_example",
]

logger = get_logger(__name__)

FIELDS = ("type", "S", "K", "r", "sigma", "T", "q")
LOG_FIELDS = ("timestamp", "level", "message")

EXAMPLE_ROWS = [
    "# type,S,K,r,sigma,T,q",
    "EUROPEAN_CALL,100,100,0.05,0.2,1.0,0.0",
    "EUROPEAN_PUT,100,95,0.05,0.25,0.5,0.0",
    "BINARY_CALL,100,110,0.03,0.3,0.5,0.0",
    "DIGITAL_PUT,80,85,0.04,0.25,0.75,0.0",
]


def _data_lines(path) -> Iterator[tuple[int, str]]:
    """(line number, stripped text) for every non-blank, non-comment line."""
    with open(path, newline="", encoding="utf-8") as f:
        for lineno, raw in enumerate(f, start=1):
            line = raw.strip()
            if not line or line.startswith("#"):
                continue
            yield lineno, line


def parse_row(fields: Sequence[str]) -> OptionContract:
    """Build a contract from the seven CSV fields.  Extra fields are ignored."""
    if len(fields) < len(FIELDS):
        raise ValueError(f"expected {len(FIELDS)} fields, got {len(fields)}")
    kind = OptionType.parse(fields[0])
    S, K, r, sigma, T, q = (float(x) for x in fields[1:7])
    return OptionContract(kind, S, K, r, sigma, T, q)


def format_row(o: OptionContract) -> list[str]:
    return [o.type.name] + [repr(float(x)) for x in (o.S, o.K, o.r, o.sigma, o.T, o.q)]


def read_contracts(path) -> list[OptionContract]:
    """Read every valid row of ``path``; invalid rows are logged and skipped."""
    out = []
    for lineno, line in _data_lines(path):
        try:
            out.append(parse_row(next(csv.reader([line]))))
        except ValueError as e:
            logger.warning("csv_row_skipped", path=str(path), line=lineno, text=line, error=str(e))
    return out


def validate_csv(path) -> tuple[list[str], list[str]]:
    """Split ``path`` into good data lines and ``"<lineno>:<text>"`` bad ones."""
    good, bad = [], []
    for lineno, line in _data_lines(path):
        try:
            parse_row(next(csv.reader([line])))
        except ValueError:
            bad.append(f"{lineno}:{line}")
        else:
            good.append(line)
    return good, bad


def repair_csv(src, dst) -> tuple[int, int]:
    """Copy only the valid rows of ``src`` to ``dst``.  Returns (good, bad) counts."""
    good, bad = validate_csv(src)
    Path(dst).write_text("".join(line + "\n" for line in good), encoding="utf-8")
    logger.info("csv_repaired", src=str(src), dst=str(dst), good=len(good), bad=len(bad))
    return len(good), len(bad)


def write_results(path, contracts: Sequence[OptionContract], values: Sequence[float],
                  column: str = "price") -> None:
    """One ``type,S,K,r,sigma,T,q,<column>`` row per contract, six decimals."""
    if len(contracts) != len(values):
        raise ValueError("contracts and values must have the same length")
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow([*FIELDS, column])
        for o, v in zip(contracts, values):
            writer.writerow([o.type.name] + [f"{x:.6f}" for x in (o.S, o.K, o.r, o.sigma, o.T, o.q, v)])
    logger.info("results_written", path=str(path), rows=len(contracts))


def write_log_summary(path, entries: Sequence[tuple[str, str, str]]) -> int:
    """Write ``timestamp,level,message`` rows; returns the row count."""
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(LOG_FIELDS)
        writer.writerows(entries)
    return len(entries)


def write_example(path) -> None:
    Path(path).write_text("\n".join(EXAMPLE_ROWS) + "\n", encoding="utf-8")
