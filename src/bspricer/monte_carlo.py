# bspricer/monte_carlo.py

from __future__ import annotations
import math
from typing import Iterator, Tuple

import numpy as np

from .core import OptionContract, payoff

__all__ = ["simulate", "payoff_sum", "terminal_prices"]

DEFAULT_CHUNK = 100_000


# ---- helpers: generator, Box-Muller draws, terminal prices ----

def _rng(seed: int) -> np.random.Generator:
    """Per-call generator.  ``seed == 0`` means fresh OS entropy.

    Any other integer, negative included, is folded into numpy's unsigned
    64-bit seed range.
    """
    return np.random.default_rng(None if seed == 0 else seed % 2**64)


def _chunks(n: int, chunk_size: int) -> Iterator[int]:
    remaining = int(n)
    while remaining > 0:
        m = min(chunk_size, remaining)
        yield m
        remaining -= m


def _box_muller(rng: np.random.Generator, m: int) -> np.ndarray:
    """``m`` standard normals, two uniforms ``(u1, u2)`` consumed per draw.

    Uniforms are drawn row by row, so splitting a run into chunks does not
    change the stream.  ``u1`` is mapped from [0, 1) onto (0, 1] to keep
    the log finite.
    """
    u = rng.random((m, 2))
    u1 = 1.0 - u[:, 0]
    u2 = u[:, 1]
    return np.sqrt(-2.0 * np.log(u1)) * np.cos(2.0 * math.pi * u2)


def _terminal(o: OptionContract, z: np.ndarray) -> np.ndarray:
    # exact GBM step under Q, terminal only
    drift = (o.r - o.q - 0.5 * o.sigma * o.sigma) * o.T
    # T < 0 gives a NaN volatility term and NaN prices
    with np.errstate(invalid="ignore"):
        vol = o.sigma * np.sqrt(np.float64(o.T))
    return o.S * np.exp(drift + vol * z)


# ---- public API ----

def payoff_sum(
    o: OptionContract, n_sims: int, seed: int = 0,
    *, chunk_size: int = DEFAULT_CHUNK,
) -> Tuple[float, int]:
    """Plain-mode inner loop without discounting.

    Returns the raw payoff sum and the number of draws behind it, the
    sufficient statistics a caller needs to combine several runs.
    """
    if n_sims <= 0:
        return (0.0, 0)

    rng = _rng(seed)
    total = 0.0
    for m in _chunks(n_sims, chunk_size):
        ST = _terminal(o, _box_muller(rng, m))
        total += float(np.sum(payoff(o.type, ST, o.K)))
    return total, int(n_sims)


def simulate(
    o: OptionContract, n_sims: int, seed: int = 0, antithetic: bool = False,
    *, chunk_size: int = DEFAULT_CHUNK,
) -> float:
    """Monte Carlo value of ``o`` under risk-neutral GBM.

    Parameters
    ----------
    n_sims : int
        Number of normal draws.  In antithetic mode each draw ``z`` yields
        the pair ``(+z, -z)`` and counts once, so plain and antithetic runs
        with the same ``n_sims`` consume the same random stream.
    seed : int
        0 for an unpredictable seed; any other integer makes the
        result bit-for-bit reproducible.
    antithetic : bool
        Average each draw with its mirror image.

    Notes
    -----
    Draws are streamed in chunks of ``chunk_size`` to cap memory.  Only the
    discounted mean is returned; there is no standard-error estimate.
    """
    if n_sims <= 0:
        raise ValueError(f"n_sims must be > 0, got {n_sims}")

    if not antithetic:
        total, count = payoff_sum(o, n_sims, seed, chunk_size=chunk_size)
    else:
        rng = _rng(seed)
        total, count = 0.0, int(n_sims)
        for m in _chunks(n_sims, chunk_size):
            z = _box_muller(rng, m)
            pair = payoff(o.type, _terminal(o, z), o.K) + payoff(o.type, _terminal(o, -z), o.K)
            total += float(np.sum(0.5 * pair))

    return math.exp(-o.r * o.T) * (total / count)


def terminal_prices(o: OptionContract, n_sims: int, seed: int = 0) -> np.ndarray:
    """Plain-mode terminal prices, e.g. for a histogram.

    Same draws as :func:`simulate` with ``antithetic=False`` and the same
    seed.
    """
    if n_sims <= 0:
        raise ValueError(f"n_sims must be > 0, got {n_sims}")
    return _terminal(o, _box_muller(_rng(seed), n_sims))
