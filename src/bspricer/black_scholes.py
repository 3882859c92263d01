import math
from dataclasses import dataclass, asdict
from typing import Dict

import numpy as np

from .core import OptionContract, OptionType, payoff
from .normal import norm_pdf, norm_cdf

__all__ = ["Greeks", "d1", "d2", "price", "greeks"]

_NAN = float("nan")


@dataclass(frozen=True)
class Greeks:
    """First/second-order sensitivities.

    Vega is dPrice/dSigma (absolute, not per 1%), theta is per year.
    Every field is NaN when the contract is at or past maturity.
    """
    delta: float
    gamma: float
    vega: float
    theta: float
    rho: float

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)


def d1(o: OptionContract) -> float:
    if o.T <= 0 or o.sigma <= 0:
        return _NAN
    # S <= 0 or K == 0 give +-inf/NaN rather than raising
    with np.errstate(divide="ignore", invalid="ignore"):
        moneyness = np.log(np.float64(o.S) / o.K)
    return float((moneyness + (o.r - o.q + 0.5 * o.sigma * o.sigma) * o.T) / (o.sigma * math.sqrt(o.T)))


def d2(o: OptionContract) -> float:
    # NaN from d1 propagates; sqrt is guarded for T <= 0
    return d1(o) - o.sigma * math.sqrt(max(o.T, 0.0))


def price(o: OptionContract) -> float:
    """Closed-form Black-Scholes-Merton value.

    At or past maturity (``T <= 0``) the intrinsic payoff of the spot is
    returned instead; it is the T -> 0 limit of the formulas below.
    """
    if o.T <= 0:
        return float(payoff(o.type, o.S, o.K))

    D1, D2 = d1(o), d2(o)
    disc_r = math.exp(-o.r * o.T)
    disc_spot = o.S * math.exp(-o.q * o.T)
    disc_strike = o.K * disc_r

    if o.type is OptionType.EUROPEAN_CALL:
        return disc_spot * norm_cdf(D1) - disc_strike * norm_cdf(D2)
    elif o.type is OptionType.EUROPEAN_PUT:
        return disc_strike * norm_cdf(-D2) - disc_spot * norm_cdf(-D1)
    elif o.type is OptionType.BINARY_CALL:
        return disc_r * norm_cdf(D2)
    elif o.type is OptionType.DIGITAL_PUT:
        return disc_r * norm_cdf(-D2)
    else:
        raise ValueError(f"unsupported option type: {o.type!r}")


def greeks(o: OptionContract) -> Greeks:
    """Analytic Greeks.

    Binary and digital contracts report delta 0; gamma and vega use the
    vanilla expressions for every type.  Only ``EUROPEAN_CALL`` takes the
    call branch for theta and rho, all other types take the put branch.
    """
    if o.T <= 0:
        return Greeks(_NAN, _NAN, _NAN, _NAN, _NAN)

    D1, D2 = d1(o), d2(o)
    n_d1   = norm_pdf(D1)
    disc_r = math.exp(-o.r * o.T)
    disc_q = math.exp(-o.q * o.T)
    sqrt_T = math.sqrt(o.T)
    is_call = o.type is OptionType.EUROPEAN_CALL

    if is_call:
        delta = disc_q * norm_cdf(D1)
    elif o.type is OptionType.EUROPEAN_PUT:
        delta = disc_q * (norm_cdf(D1) - 1.0)
    else:
        delta = 0.0

    # Common
    with np.errstate(divide="ignore", invalid="ignore"):
        gamma = float(disc_q * n_d1 / (np.float64(o.S) * o.sigma * sqrt_T))
    vega  = o.S * disc_q * n_d1 * sqrt_T

    decay = -o.S * n_d1 * o.sigma * disc_q / (2.0 * sqrt_T)
    if is_call:
        theta = (decay
                 - o.r * o.K * disc_r * norm_cdf(D2)
                 + o.q * o.S * disc_q * norm_cdf(D1))
        rho   = o.K * o.T * disc_r * norm_cdf(D2)
    else:
        theta = (decay
                 + o.r * o.K * disc_r * norm_cdf(-D2)
                 - o.q * o.S * disc_q * norm_cdf(-D1))
        rho   = -o.K * o.T * disc_r * norm_cdf(-D2)

    return Greeks(delta=delta, gamma=gamma, vega=vega, theta=theta, rho=rho)
