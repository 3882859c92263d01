# normal.py
# Standard-normal density and the Abramowitz & Stegun (7.1.26) approximation
# of the cumulative distribution.  Every analytic price and Greek is built
# on these two functions, so they are only as accurate as the CDF below
# (absolute error around 1e-7).

from __future__ import annotations
import math

__all__ = ["norm_pdf", "norm_cdf"]

_INV_SQRT_2PI = 1.0 / math.sqrt(2.0 * math.pi)
_SQRT2 = math.sqrt(2.0)

# A&S 7.1.26 coefficients for erf
_P  = 0.3275911
_A1 = 0.254829592
_A2 = -0.284496736
_A3 = 1.421413741
_A4 = -1.453152027
_A5 = 1.061405429


def norm_pdf(x: float) -> float:
    """Standard normal density exp(-x^2/2) / sqrt(2*pi)."""
    return math.exp(-0.5 * x * x) * _INV_SQRT_2PI


def norm_cdf(x: float) -> float:
    """Standard normal CDF via the A&S rational approximation of erf.

    The approximation is evaluated at ``|x|/sqrt(2)`` and mirrored by the
    sign of ``x``.  NaN in gives NaN out.
    """
    sign = -1.0 if x < 0 else 1.0
    ax = abs(x) / _SQRT2
    t = 1.0 / (1.0 + _P * ax)
    poly = ((((_A5 * t + _A4) * t + _A3) * t + _A2) * t + _A1) * t
    erf = sign * (1.0 - poly * math.exp(-ax * ax))
    return 0.5 * (1.0 + erf)
