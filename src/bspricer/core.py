from __future__ import annotations
from dataclasses import dataclass, replace
from enum import Enum

import numpy as np


class OptionType(Enum):
    """The four supported payoff variants.

    Member names double as the CSV spelling of the ``type`` column.
    """
    EUROPEAN_CALL = "european_call"
    EUROPEAN_PUT = "european_put"
    BINARY_CALL = "binary_call"       # cash-or-nothing, pays 1 if S_T > K
    DIGITAL_PUT = "digital_put"       # cash-or-nothing, pays 1 if S_T < K

    @classmethod
    def parse(cls, text: str) -> "OptionType":
        name = str(text).strip().upper()
        try:
            return cls[name]
        except KeyError:
            valid = ", ".join(m.name for m in cls)
            raise ValueError(f"unsupported option type {text!r}; expected one of {valid}") from None

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class OptionContract:
    """One option's contract and market parameters.

    No validation is done here: degenerate inputs are allowed to propagate
    as NaN/Inf through the pricers.  ``T <= 0`` selects the intrinsic-value
    path and ``sigma <= 0`` makes ``d1``/``d2`` undefined.

    Parameters
    ----------
    type : OptionType
    S : float
        Spot price.
    K : float
        Strike price.
    r : float
        Continuously-compounded risk-free rate.
    sigma : float
        Annualised volatility.
    T : float
        Time to maturity in years.
    q : float
        Continuous dividend yield.
    """
    type: OptionType
    S: float
    K: float
    r: float
    sigma: float
    T: float
    q: float = 0.0

    def with_sigma(self, sigma: float) -> "OptionContract":
        """Same contract, different volatility."""
        return replace(self, sigma=sigma)

    def __str__(self) -> str:
        return (f"{self.type.name} {{S={self.S:.4f}, K={self.K:.4f}, r={self.r:.4f}, "
                f"sigma={self.sigma:.4f}, T={self.T:.4f}, q={self.q:.4f}}}")


def payoff(kind: OptionType, ST, K: float):
    """Terminal payoff of ``kind`` at price(s) ``ST``.

    Accepts a scalar or a NumPy array of terminal prices and broadcasts.
    """
    if kind is OptionType.EUROPEAN_CALL:
        return np.maximum(ST - K, 0.0)
    if kind is OptionType.EUROPEAN_PUT:
        return np.maximum(K - ST, 0.0)
    if kind is OptionType.BINARY_CALL:
        return np.where(ST > K, 1.0, 0.0)
    if kind is OptionType.DIGITAL_PUT:
        return np.where(ST < K, 1.0, 0.0)
    raise ValueError(f"unsupported option type: {kind!r}")


EUROPEAN_CALL = OptionType.EUROPEAN_CALL
EUROPEAN_PUT  = OptionType.EUROPEAN_PUT
BINARY_CALL   = OptionType.BINARY_CALL
DIGITAL_PUT   = OptionType.DIGITAL_PUT
