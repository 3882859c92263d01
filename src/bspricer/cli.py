import argparse
import math
import time

from .core import OptionContract, OptionType, EUROPEAN_CALL
from .black_scholes import price as bs_price, greeks as bs_greeks
from .monte_carlo import simulate, terminal_prices
from .implied_vol import solve
from .parallel import simulate_parallel
from . import csvio, histogram, journal
from .selftest import run_self_test

logger = journal.get_logger(__name__)

DEFAULT_LOG = "bs_sim_log.txt"


def _kind(s: str) -> OptionType:
    try:
        return OptionType.parse(s)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def _fmt(x) -> str:
    return "nan" if x is None or math.isnan(x) else f"{x:.6f}"


def add_common(parser: argparse.ArgumentParser):
    parser.add_argument("--type", dest="kind", type=_kind, default=EUROPEAN_CALL,
                        help="EUROPEAN_CALL|EUROPEAN_PUT|BINARY_CALL|DIGITAL_PUT")
    parser.add_argument("--S", type=float, required=True, help="spot")
    parser.add_argument("--K", type=float, required=True, help="strike")
    parser.add_argument("--r", type=float, required=True, help="cont. risk-free")
    parser.add_argument("--sigma", type=float, required=True)
    parser.add_argument("--T", type=float, required=True, help="years")
    parser.add_argument("--q", type=float, default=0.0, help="cont. dividend yield")


def _contract(args) -> OptionContract:
    return OptionContract(args.kind, args.S, args.K, args.r, args.sigma, args.T, args.q)


def _print_greeks(g):
    print(", ".join(f"{k.capitalize()}={_fmt(v)}" for k, v in g.as_dict().items()))


def cmd_price(args):
    oc = _contract(args)
    px = bs_price(oc)
    print(f"Analytic price = {_fmt(px)}")
    _print_greeks(bs_greeks(oc))
    journal.record("ANALYTIC", oc, px)


def cmd_greeks(args):
    oc = _contract(args)
    g = bs_greeks(oc)
    _print_greeks(g)
    journal.record("GREEKS", oc, bs_price(oc), **g.as_dict())


def cmd_mc(args):
    oc = _contract(args)
    t0 = time.perf_counter()
    px = simulate(oc, args.n_sims, args.seed, antithetic=args.antithetic)
    ms = (time.perf_counter() - t0) * 1e3
    print(f"MC price = {_fmt(px)}   Time(ms): {ms:.0f}")
    journal.record("MC", oc, px, n_sims=args.n_sims, antithetic=args.antithetic, seed=args.seed)


def cmd_iv(args):
    oc = _contract(args)
    iv = solve(oc, args.market, args.tol, args.max_iter)
    if iv is None:
        print("Implied vol not found")
    else:
        print(f"Implied volatility = {_fmt(iv)}")
    journal.record("IMPLIED_VOL", oc, iv, market=args.market)


def cmd_parallel(args):
    oc = _contract(args)
    t0 = time.perf_counter()
    px = simulate_parallel(oc, args.n_sims, args.workers, args.seed)
    ms = (time.perf_counter() - t0) * 1e3
    print(f"Parallel MC price = {_fmt(px)}   Time(ms): {ms:.0f}")
    journal.record("MC_PARALLEL", oc, px, n_sims=args.n_sims, workers=args.workers, seed=args.seed)


def cmd_hist(args):
    oc = _contract(args)
    for line in histogram.render(terminal_prices(oc, args.n_sims, args.seed), bins=args.bins):
        print(line)
    journal.record("HISTOGRAM", oc, float("nan"), n_sims=args.n_sims, bins=args.bins)


def cmd_batch(args):
    contracts = csvio.read_contracts(args.input)
    if not contracts:
        print(f"No options read from {args.input}")
        return 1

    priced, values = [], []
    for i, oc in enumerate(contracts, start=1):
        try:
            if args.mc:
                seed = 0 if args.seed == 0 else args.seed + i
                px = simulate(oc, args.n_sims, seed)
            else:
                px = bs_price(oc)
        except ValueError as e:
            print(f"Skipping option due to error: {oc} ({e})")
            logger.warning("batch_row_failed", row=i, contract=str(oc), error=str(e))
            continue
        priced.append(oc)
        values.append(px)
        print(f"{oc} -> {_fmt(px)}")

    column = "mc_price" if args.mc else "price"
    csvio.write_results(args.output, priced, values, column=column)
    print(f"Saved results to {args.output}")
    journal.record("BATCH", None, float(len(priced)), input=args.input, output=args.output, mc=args.mc)
    return 0


def cmd_repair(args):
    good, bad = csvio.validate_csv(args.input)
    print(f"Good lines: {len(good)}   Bad lines: {len(bad)}")
    if not bad:
        print("File looks OK")
        return
    print("First bad lines:")
    for line in bad[:10]:
        print(line)
    csvio.repair_csv(args.input, args.output)
    print(f"Saved repaired file to {args.output}")


def cmd_example(args):
    csvio.write_example(args.output)
    print(f"Saved example to {args.output}")


def cmd_selftest(args):
    res = run_self_test(seed=args.seed)
    for key, val in res.items():
        print(f"{key}: {_fmt(val)}")
    journal.record("SELFTEST", None, res["call_price"])


def cmd_log(args):
    if args.clear:
        journal.clear(args.log_file)
        print("Log cleared")
        return
    if args.export:
        entries = [journal.parse_line(line) for line in journal.tail(args.log_file, None)]
        n = csvio.write_log_summary(args.export, entries)
        print(f"Exported {n} log entries to {args.export}")
        return
    lines = journal.tail(args.log_file, args.tail)
    if not lines:
        print("No log entries yet.")
    for line in lines:
        print(line)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="bspricer", description="Black-Scholes pricing engine CLI")
    p.add_argument("--log-file", default=DEFAULT_LOG, help="append-only operation log")
    p.add_argument("--log-level", default="INFO", type=str.upper,
                   choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    sub = p.add_subparsers(dest="cmd", required=True)

    p_px = sub.add_parser("price", help="Analytic price and Greeks")
    add_common(p_px)
    p_px.set_defaults(func=cmd_price)

    p_gk = sub.add_parser("greeks", help="Analytic Greeks")
    add_common(p_gk)
    p_gk.set_defaults(func=cmd_greeks)

    p_mc = sub.add_parser("mc", help="Monte Carlo price (GBM, Box-Muller)")
    add_common(p_mc)
    p_mc.add_argument("--n-sims", dest="n_sims", type=int, default=100_000)
    p_mc.add_argument("--seed", type=int, default=0, help="0 for random")
    p_mc.add_argument("--antithetic", action="store_true")
    p_mc.set_defaults(func=cmd_mc)

    p_iv = sub.add_parser("iv", help="Implied volatility")
    add_common(p_iv)
    p_iv.add_argument("--market", type=float, required=True, help="observed price")
    p_iv.add_argument("--tol", type=float, default=1e-6)
    p_iv.add_argument("--max-iter", dest="max_iter", type=int, default=300)
    p_iv.set_defaults(func=cmd_iv)

    p_par = sub.add_parser("parallel", help="Multi-process Monte Carlo price")
    add_common(p_par)
    p_par.add_argument("--n-sims", dest="n_sims", type=int, default=200_000)
    p_par.add_argument("--workers", type=int, default=4)
    p_par.add_argument("--seed", type=int, default=0, help="0 for random")
    p_par.set_defaults(func=cmd_parallel)

    p_hist = sub.add_parser("hist", help="ASCII histogram of terminal prices")
    add_common(p_hist)
    p_hist.add_argument("--n-sims", dest="n_sims", type=int, default=20_000)
    p_hist.add_argument("--seed", type=int, default=0, help="0 for random")
    p_hist.add_argument("--bins", type=int, default=30)
    p_hist.set_defaults(func=cmd_hist)

    p_batch = sub.add_parser("batch", help="Price every row of a CSV file")
    p_batch.add_argument("--input", default="options.csv")
    p_batch.add_argument("--output", default="results.csv")
    p_batch.add_argument("--mc", action="store_true", help="Monte Carlo instead of analytic")
    p_batch.add_argument("--n-sims", dest="n_sims", type=int, default=20_000)
    p_batch.add_argument("--seed", type=int, default=0, help="base seed, 0 for random")
    p_batch.set_defaults(func=cmd_batch)

    p_rep = sub.add_parser("repair", help="Validate a CSV file and drop bad rows")
    p_rep.add_argument("--input", default="options.csv")
    p_rep.add_argument("--output", default="options_repaired.csv")
    p_rep.set_defaults(func=cmd_repair)

    p_ex = sub.add_parser("example", help="Write an example CSV")
    p_ex.add_argument("--output", default="options_example.csv")
    p_ex.set_defaults(func=cmd_example)

    p_st = sub.add_parser("selftest", help="Run the engine self-test")
    p_st.add_argument("--seed", type=int, default=42)
    p_st.set_defaults(func=cmd_selftest)

    p_log = sub.add_parser("log", help="Show or manage the operation log")
    p_log.add_argument("--tail", type=int, default=50)
    p_log.add_argument("--clear", action="store_true")
    p_log.add_argument("--export", metavar="CSV", help="write timestamp,level,message rows to CSV")
    p_log.set_defaults(func=cmd_log)

    return p


def main(argv=None):
    args = build_parser().parse_args(argv)
    journal.configure_logging(args.log_file, args.log_level)
    try:
        return args.func(args) or 0
    except ValueError as e:
        logger.error("command_failed", cmd=args.cmd, error=str(e))
        print(f"error: {e}")
        return 2
    finally:
        journal.configure_logging(None, args.log_level)


if __name__ == "__main__":
    raise SystemExit(main())
