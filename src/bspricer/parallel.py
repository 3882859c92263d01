# bspricer/parallel.py
# Fork-join Monte Carlo: split a sample budget across worker processes,
# each running the plain-mode inner loop on its own seeded stream, then
# combine the undiscounted sums and discount once.

from __future__ import annotations
import math
from concurrent.futures import ProcessPoolExecutor
from typing import List

from .core import OptionContract
from .monte_carlo import simulate, payoff_sum

__all__ = ["chunk_sizes", "worker_seeds", "simulate_parallel"]


def chunk_sizes(total: int, workers: int) -> List[int]:
    """``workers`` equal chunks of ``total``; the last one takes the remainder."""
    per = total // workers
    return [per] * (workers - 1) + [total - per * (workers - 1)]


def worker_seeds(seed: int, workers: int) -> List[int]:
    """Base seed 0 leaves every worker on fresh entropy, else ``seed + i``.

    Negative bases step downwards (``seed - i``) so no worker lands on 0.
    """
    if seed == 0:
        return [0] * workers
    step = 1 if seed > 0 else -1
    return [seed + step * i for i in range(workers)]


def simulate_parallel(
    o: OptionContract, total_sims: int, workers: int, seed: int = 0,
) -> float:
    """Plain Monte Carlo value of ``o`` computed by ``workers`` processes.

    With ``workers <= 1`` this is just :func:`~bspricer.monte_carlo.simulate`.
    Blocks until every worker has finished.
    """
    if workers <= 1:
        return simulate(o, total_sims, seed, antithetic=False)
    if total_sims <= 0:
        raise ValueError(f"total_sims must be > 0, got {total_sims}")

    sizes = chunk_sizes(total_sims, workers)
    seeds = worker_seeds(seed, workers)

    with ProcessPoolExecutor(max_workers=workers) as ex:
        futs = [ex.submit(payoff_sum, o, m, s) for m, s in zip(sizes, seeds)]
        # collect in submission order so a fixed seed sums identically
        stats = [f.result() for f in futs]

    total = sum(s[0] for s in stats)
    count = sum(s[1] for s in stats)
    if count == 0:
        return float("nan")
    return math.exp(-o.r * o.T) * (total / count)
