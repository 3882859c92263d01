"""Quick end-to-end sanity run of the engine on reference contracts."""

from __future__ import annotations

from .core import OptionContract, EUROPEAN_CALL, EUROPEAN_PUT
from .black_scholes import price
from .monte_carlo import simulate
from .implied_vol import solve

REFERENCE_CALL = OptionContract(EUROPEAN_CALL, 100.0, 100.0, 0.05, 0.2, 1.0, 0.0)
REFERENCE_PUT = OptionContract(EUROPEAN_PUT, 100.0, 110.0, 0.03, 0.25, 0.5, 0.0)


def run_self_test(seed: int = 42, n_sims: int = 5_000) -> dict:
    call_px = price(REFERENCE_CALL)
    return {
        "call_price": call_px,
        "put_price": price(REFERENCE_PUT),
        "call_mc_antithetic": simulate(REFERENCE_CALL, n_sims, seed, antithetic=True),
        "call_implied_vol": solve(REFERENCE_CALL, call_px, 1e-6, 200),
    }
