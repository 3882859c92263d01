import pytest

from bspricer.core import OptionContract, EUROPEAN_CALL
from bspricer import journal


@pytest.fixture
def atm_call():
    return OptionContract(EUROPEAN_CALL, S=100.0, K=100.0, r=0.05, sigma=0.2, T=1.0, q=0.0)


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    # close any file sink a test left open
    journal.configure_logging(None)
