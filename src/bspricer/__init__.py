# bspricer: Black-Scholes-Merton pricing engine
# Public API

# Contract model
from .core import (
    OptionType, OptionContract, payoff,
    EUROPEAN_CALL, EUROPEAN_PUT, BINARY_CALL, DIGITAL_PUT,
)

# Normal distribution
from .normal import norm_pdf, norm_cdf

# Analytic pricer
from .black_scholes import Greeks, d1, d2, price as bs_price, greeks as bs_greeks

# Monte Carlo
from .monte_carlo import simulate, payoff_sum, terminal_prices
from .parallel import simulate_parallel, chunk_sizes

# Implied volatility
from .implied_vol import solve as implied_vol

__all__ = [
    # Contract model
    "OptionType", "OptionContract", "payoff",
    "EUROPEAN_CALL", "EUROPEAN_PUT", "BINARY_CALL", "DIGITAL_PUT",
    # Normal distribution
    "norm_pdf", "norm_cdf",
    # Analytic
    "Greeks", "d1", "d2", "bs_price", "bs_greeks",
    # Monte Carlo
    "simulate", "payoff_sum", "terminal_prices",
    "simulate_parallel", "chunk_sizes",
    # Implied vol
    "implied_vol",
]

__version__ = "0.1.0"
