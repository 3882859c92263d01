"""Tests for the contract model and payoff dispatch."""

import dataclasses

import numpy as np
import pytest

from bspricer.core import (
    OptionContract, OptionType, payoff,
    EUROPEAN_CALL, EUROPEAN_PUT, BINARY_CALL, DIGITAL_PUT,
)


class TestOptionType:
    def test_parse_names(self):
        for member in OptionType:
            assert OptionType.parse(member.name) is member

    def test_parse_lenient(self):
        assert OptionType.parse("  binary_call ") is BINARY_CALL

    def test_parse_unknown(self):
        with pytest.raises(ValueError):
            OptionType.parse("AMERICAN_CALL")


class TestOptionContract:
    def test_frozen(self, atm_call):
        with pytest.raises(dataclasses.FrozenInstanceError):
            atm_call.sigma = 0.3

    def test_with_sigma_returns_new(self, atm_call):
        bumped = atm_call.with_sigma(0.35)
        assert bumped.sigma == 0.35
        assert atm_call.sigma == 0.2
        assert dataclasses.replace(bumped, sigma=0.2) == atm_call

    def test_str_summary(self, atm_call):
        assert str(atm_call) == (
            "EUROPEAN_CALL {S=100.0000, K=100.0000, r=0.0500, "
            "sigma=0.2000, T=1.0000, q=0.0000}"
        )

    def test_no_validation(self):
        o = OptionContract(EUROPEAN_PUT, -1.0, 0.0, 0.0, -0.1, -2.0, 0.0)
        assert o.T == -2.0


class TestPayoff:
    def test_vanilla(self):
        assert payoff(EUROPEAN_CALL, 110.0, 100.0) == 10.0
        assert payoff(EUROPEAN_CALL, 90.0, 100.0) == 0.0
        assert payoff(EUROPEAN_PUT, 90.0, 100.0) == 10.0
        assert payoff(EUROPEAN_PUT, 110.0, 100.0) == 0.0

    def test_digital_strict_at_strike(self):
        assert payoff(BINARY_CALL, 100.0, 100.0) == 0.0
        assert payoff(DIGITAL_PUT, 100.0, 100.0) == 0.0
        assert payoff(BINARY_CALL, 100.01, 100.0) == 1.0
        assert payoff(DIGITAL_PUT, 99.99, 100.0) == 1.0

    def test_vectorised(self):
        ST = np.array([80.0, 100.0, 120.0])
        np.testing.assert_array_equal(payoff(EUROPEAN_CALL, ST, 100.0), [0.0, 0.0, 20.0])
        np.testing.assert_array_equal(payoff(DIGITAL_PUT, ST, 100.0), [1.0, 0.0, 0.0])

    def test_unsupported(self):
        with pytest.raises(ValueError):
            payoff("AMERICAN_CALL", 100.0, 100.0)
