"""Implied volatility by bracket-then-refine root finding.

The method is picked once, up front, from the signs of the pricing error at
two probe volatilities:

* opposite signs (or a probe hits the price exactly): bisection, which
  always returns a best-effort midpoint;
* same sign: Newton-Raphson on vega, which reports ``None`` when it stalls
  or runs out of iterations.

The two branches never hand over to each other.
"""

from __future__ import annotations
from typing import Optional

from .core import OptionContract
from .black_scholes import price, greeks

__all__ = ["solve", "SIGMA_LO", "SIGMA_HI", "VEGA_FLOOR"]

SIGMA_LO = 1e-6
SIGMA_HI = 5.0
VEGA_FLOOR = 1e-8

# Newton start is clamped into this range
_GUESS_LO, _GUESS_HI = 1e-3, 1.0
_DEFAULT_GUESS = 0.2


def _price_at(o: OptionContract, sigma: float) -> float:
    return price(o.with_sigma(sigma))


def _bisect(o, market_price, plo, tol, max_iter) -> float:
    lo, hi = SIGMA_LO, SIGMA_HI
    for _ in range(max_iter):
        mid = 0.5 * (lo + hi)
        pm = _price_at(o, mid) - market_price
        if abs(pm) < tol:
            return mid
        if plo * pm <= 0:
            hi = mid
        else:
            lo, plo = mid, pm
    return 0.5 * (lo + hi)


def _newton(o, market_price, tol, max_iter) -> Optional[float]:
    guess = o.sigma if o.sigma > 0 else _DEFAULT_GUESS
    sigma = max(_GUESS_LO, min(_GUESS_HI, guess))
    for _ in range(max_iter):
        trial = o.with_sigma(sigma)
        diff = price(trial) - market_price
        if abs(diff) < tol:
            return sigma
        vega = greeks(trial).vega
        # NaN vega (T <= 0) is as unusable as a flat one
        if not vega >= VEGA_FLOOR:
            return None
        sigma -= diff / vega
        if sigma <= 0:
            sigma = SIGMA_LO
    return None


def solve(
    o: OptionContract, market_price: float,
    tol: float = 1e-6, max_iter: int = 200,
) -> Optional[float]:
    """Volatility at which the analytic price of ``o`` equals ``market_price``.

    Only ``o.sigma`` is varied (it also seeds the Newton branch).  Returns
    ``None`` when no volatility is found: a non-positive market price, a
    flat vega or an exhausted Newton run.  An exhausted bisection returns
    the midpoint of its last bracket.
    """
    if market_price <= 0:
        return None

    plo = _price_at(o, SIGMA_LO) - market_price
    phi = _price_at(o, SIGMA_HI) - market_price

    if plo * phi <= 0:
        return _bisect(o, market_price, plo, tol, max_iter)
    return _newton(o, market_price, tol, max_iter)
