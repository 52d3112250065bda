from __future__ import annotations

import argparse
import json
import sys
from typing import Any

from . import config as _config
from .api import plot, solve
from .config import VERSION, VAR_NAME_RE
from .logging_config import get_logger, setup_logging

logger = get_logger("cli")

EXIT_COMMANDS = {"quit", "exit"}


def print_result_pretty(res: dict[str, Any], output_format: str = "human") -> None:
    """Print result in specified format.

    Args:
        res: Result dictionary (``SolveResult.to_dict()`` or
            ``InequalityResult.to_dict()``)
        output_format: "json" for JSON output, "human" for human-readable
    """
    if output_format == "json":
        print(json.dumps(res, indent=2, ensure_ascii=False))
        return
    if not res.get("ok"):
        print("Error:", res.get("error"))
        return
    for index, step in enumerate(res.get("steps", []), start=1):
        print(f"  {index}. {step}")
    typ = res.get("type")
    if typ == "equation":
        approx = res.get("approx") or []
        exact = res.get("exact") or []
        if not approx:
            print("No real solutions found.")
            return
        for index, (decimal, fraction) in enumerate(zip(approx, exact), start=1):
            print(f"Solution {index}: {decimal} ({fraction})")
    elif typ == "inequality":
        print("Solution:", res.get("solution"))
    else:
        print(res)


def evaluate_line(
    text: str,
    output_format: str = "human",
    variable: str | None = None,
    plot_path: str | None = None,
    ascii_plot: bool = False,
) -> int:
    """Solve one line of input, print it, and return the exit code."""
    result = solve(text, variable)
    print_result_pretty(result.to_dict(), output_format=output_format)
    if not result.ok:
        return 1
    if ascii_plot or plot_path is not None:
        plotted = plot(
            text,
            variable,
            ascii=ascii_plot,
            output_path=plot_path or None,
        )
        if not plotted.ok:
            print("Plot error:", plotted.error)
        elif ascii_plot:
            print(plotted.result)
        else:
            print("Plot saved to", plotted.result)
    return 0


def repl_loop(output_format: str = "human", variable: str | None = None) -> None:
    """Interactive REPL loop; ends on quit, exit, EOF or Ctrl+C."""
    try:
        import readline  # noqa: F401
    except ImportError:
        # readline not available on Windows - that's fine
        pass

    print("Sarva — enter an equation or inequality, 'quit' to exit.")
    while True:
        try:
            raw = input(">>> ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nGoodbye.")
            break
        if not raw:
            continue
        if raw.lower() in EXIT_COMMANDS:
            print("Goodbye.")
            break
        evaluate_line(raw, output_format=output_format, variable=variable)


def main_entry(argv: list[str] | None = None) -> int:
    """
    Main entry point for Sarva CLI.

    Args:
        argv: Optional command-line arguments (defaults to sys.argv)

    Returns:
        Exit code (0 for success, 1 for malformed input or compile errors)
    """
    parser = argparse.ArgumentParser(
        prog="sarva",
        description="Numerically solve single-variable equations and inequalities.",
    )
    parser.add_argument(
        "-e",
        "--eval",
        type=str,
        help="Solve one equation or inequality and exit (non-interactive)",
        dest="eval_expr",
    )
    parser.add_argument(
        "--format",
        type=str,
        choices=["json", "human"],
        default="human",
        help="Output format: json (machine-readable) or human (human-readable)",
    )
    parser.add_argument(
        "-v", "--version", action="store_true", help="Show program version"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Set logging level",
    )
    parser.add_argument("--log-file", type=str, help="Write logs to file")
    parser.add_argument(
        "--variable", type=str, help="Name of the unknown (default: x)"
    )
    parser.add_argument(
        "--max-roots", type=int, help="Maximum number of roots to report (default: 10)"
    )
    parser.add_argument(
        "--domain",
        type=float,
        nargs=2,
        metavar=("MIN", "MAX"),
        help="Critical point scan window for inequalities (default: -50 50)",
    )
    parser.add_argument(
        "--samples", type=int, help="Critical point scan resolution (default: 1000)"
    )
    parser.add_argument(
        "-p", "--precision", type=int, help="Decimal places for reported roots"
    )
    parser.add_argument(
        "--plot",
        nargs="?",
        const="",
        default=None,
        metavar="PATH",
        help="Save a PNG plot of f(x) (to a temporary file if PATH is omitted)",
    )
    parser.add_argument(
        "--ascii-plot", action="store_true", help="Print an ASCII plot of f(x)"
    )
    args = parser.parse_args(argv)

    setup_logging(level=args.log_level, log_file=args.log_file)

    if args.version:
        print(VERSION)
        return 0

    if args.variable is not None and not VAR_NAME_RE.match(args.variable):
        parser.error(f"invalid variable name: {args.variable!r}")
    if args.domain is not None and not args.domain[0] < args.domain[1]:
        parser.error("--domain requires MIN < MAX")

    # Apply CLI configuration overrides
    if args.max_roots and args.max_roots > 0:
        _config.MAX_ROOTS = int(args.max_roots)
    if args.domain is not None:
        _config.SCAN_DOMAIN_MIN, _config.SCAN_DOMAIN_MAX = args.domain
    if args.samples and args.samples > 0:
        _config.SCAN_SAMPLES = int(args.samples)
    if args.precision is not None and args.precision >= 0:
        _config.ROOT_DECIMALS = int(args.precision)
    logger.debug(
        "Configuration: max_roots=%s domain=(%s, %s) samples=%s",
        _config.MAX_ROOTS,
        _config.SCAN_DOMAIN_MIN,
        _config.SCAN_DOMAIN_MAX,
        _config.SCAN_SAMPLES,
    )

    if args.eval_expr is not None:
        expr = args.eval_expr.strip()
        # Remove ">>>" prompt if present
        if expr.startswith(">>>"):
            expr = expr[3:].strip()
        return evaluate_line(
            expr,
            output_format=args.format,
            variable=args.variable,
            plot_path=args.plot,
            ascii_plot=args.ascii_plot,
        )

    repl_loop(output_format=args.format, variable=args.variable)
    return 0


if __name__ == "__main__":
    """Allow running the CLI module directly with python -m sarva_pkg.cli"""
    sys.exit(main_entry())
