# histogram.py
# Plain-text histogram of simulated terminal prices.

from __future__ import annotations
import numpy as np

__all__ = ["render"]


def render(samples, bins: int = 30, width: int = 60) -> list[str]:
    """One line per bin: ``left - right | #### (count)``.

    Bars are scaled so the fullest bin is ``width`` marks long.  Values on
    the upper edge land in the last bin; NaN and infinite samples are
    left out.
    """
    if bins < 1:
        raise ValueError(f"bins must be >= 1, got {bins}")
    x = np.asarray(samples, dtype=float).ravel()
    x = x[np.isfinite(x)]
    if x.size == 0:
        return ["No samples"]
    lo, hi = float(x.min()), float(x.max())
    if lo == hi:
        return [f"All samples equal: {lo}"]

    step = (hi - lo) / bins
    idx = np.clip(((x - lo) / step).astype(int), 0, bins - 1)
    counts = np.bincount(idx, minlength=bins)
    peak = max(int(counts.max()), 1)

    lines = []
    for i, c in enumerate(counts):
        left = lo + i * step
        bar = "#" * int(round(c / peak * width))
        lines.append(f"{left:.4f} - {left + step:.4f} | {bar} ({int(c)})")
    return lines
