"""End-to-end tests of the command-line front end."""

import csv

import pytest

from bspricer.cli import main
from bspricer.csvio import write_example, read_contracts

CONTRACT = ["--S", "100", "--K", "100", "--r", "0.05", "--sigma", "0.2", "--T", "1.0"]


@pytest.fixture
def log_file(tmp_path):
    return str(tmp_path / "bs_sim_log.txt")


def _run(log_file, *argv):
    return main(["--log-file", log_file, *argv])


def test_price(log_file, capsys):
    assert _run(log_file, "price", *CONTRACT) == 0
    out = capsys.readouterr().out
    assert "Analytic price = 10.45" in out
    assert "Delta=0.6368" in out
    with open(log_file) as f:
        assert "op='ANALYTIC'" in f.read()


def test_price_binary(log_file, capsys):
    assert _run(log_file, "price", "--type", "binary_call", *CONTRACT) == 0
    assert "Delta=0.000000" in capsys.readouterr().out


def test_expired_greeks_nan(log_file, capsys):
    args = ["--S", "110", "--K", "100", "--r", "0.05", "--sigma", "0.2", "--T", "0"]
    assert _run(log_file, "greeks", *args) == 0
    assert "Delta=nan" in capsys.readouterr().out


def test_bad_type_rejected(log_file):
    with pytest.raises(SystemExit):
        _run(log_file, "price", "--type", "AMERICAN_CALL", *CONTRACT)


def test_mc_seeded(log_file, capsys):
    _run(log_file, "mc", *CONTRACT, "--n-sims", "2000", "--seed", "42", "--antithetic")
    first = capsys.readouterr().out.split()[3]
    _run(log_file, "mc", *CONTRACT, "--n-sims", "2000", "--seed", "42", "--antithetic")
    assert capsys.readouterr().out.split()[3] == first


def test_mc_bad_n_sims(log_file, capsys):
    assert _run(log_file, "mc", *CONTRACT, "--n-sims", "0") == 2
    assert "error:" in capsys.readouterr().out


def test_iv(log_file, capsys):
    _run(log_file, "iv", *CONTRACT, "--market", "10.450583")
    assert "Implied volatility = 0.2000" in capsys.readouterr().out
    _run(log_file, "iv", *CONTRACT, "--market", "150")
    assert "not found" in capsys.readouterr().out


def test_parallel(log_file, capsys):
    assert _run(log_file, "parallel", *CONTRACT, "--n-sims", "20000", "--workers", "2", "--seed", "7") == 0
    assert "Parallel MC price" in capsys.readouterr().out


def test_hist(log_file, capsys):
    _run(log_file, "hist", *CONTRACT, "--n-sims", "1000", "--seed", "1", "--bins", "10")
    assert len([l for l in capsys.readouterr().out.splitlines() if " | " in l]) == 10


def test_batch(log_file, tmp_path, capsys):
    src, dst = tmp_path / "options.csv", tmp_path / "results.csv"
    write_example(src)
    assert _run(log_file, "batch", "--input", str(src), "--output", str(dst)) == 0
    assert len(read_contracts(dst)) == 4
    assert dst.read_text().splitlines()[0].endswith(",price")

    mc_dst = tmp_path / "mc.csv"
    assert _run(log_file, "batch", "--input", str(src), "--output", str(mc_dst),
                "--mc", "--n-sims", "1000", "--seed", "3") == 0
    assert mc_dst.read_text().splitlines()[0].endswith(",mc_price")


def test_batch_empty(log_file, tmp_path, capsys):
    src = tmp_path / "empty.csv"
    src.write_text("# nothing here\n")
    assert _run(log_file, "batch", "--input", str(src), "--output", str(tmp_path / "o.csv")) == 1


def test_repair(log_file, tmp_path, capsys):
    src, dst = tmp_path / "options.csv", tmp_path / "fixed.csv"
    src.write_text("EUROPEAN_CALL,100,100,0.05,0.2,1.0,0.0\nBROKEN,1\n")
    _run(log_file, "repair", "--input", str(src), "--output", str(dst))
    assert "Bad lines: 1" in capsys.readouterr().out
    assert len(read_contracts(dst)) == 1


def test_selftest(log_file, capsys):
    assert _run(log_file, "selftest") == 0
    out = capsys.readouterr().out
    assert "call_implied_vol: 0.2000" in out


def test_log_tail_and_clear(log_file, capsys):
    _run(log_file, "price", *CONTRACT)
    capsys.readouterr()
    _run(log_file, "log", "--tail", "5")
    assert "ANALYTIC" in capsys.readouterr().out
    _run(log_file, "log", "--clear")
    with open(log_file) as f:
        assert f.read() == ""


def test_log_export(log_file, tmp_path, capsys):
    _run(log_file, "price", *CONTRACT)
    _run(log_file, "mc", *CONTRACT, "--n-sims", "1000", "--seed", "5")
    capsys.readouterr()
    out = tmp_path / "log_summary.csv"
    assert _run(log_file, "log", "--export", str(out)) == 0
    assert "Exported 2 log entries" in capsys.readouterr().out
    with open(out, newline="") as f:
        rows = list(csv.reader(f))
    assert rows[0] == ["timestamp", "level", "message"]
    assert [r[1] for r in rows[1:]] == ["info", "info"]
    assert "op='ANALYTIC'" in rows[1][2]
    assert "op='MC'" in rows[2][2]


def test_log_level_choices(log_file, capsys):
    assert _run(log_file, "--log-level", "warning", "selftest") == 0
    with pytest.raises(SystemExit):
        main(["--log-file", log_file, "--log-level", "bogus", "selftest"])


@pytest.mark.parametrize("bins", ["0", "-1"])
def test_hist_bad_bins(log_file, capsys, bins):
    assert _run(log_file, "hist", *CONTRACT, "--n-sims", "100", "--seed", "1", "--bins", bins) == 2
