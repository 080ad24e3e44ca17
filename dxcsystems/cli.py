"""
DXCsystems Command Line Interface

Usage:
    dxc-diagram -n <#> <#> -W <#> -L <#> [options] < table
    python -m dxcsystems -n <#> <#> -W <#> -L <#> [options] < table

Examples:
    dxc-diagram -n 1 2 -W 5 -L 20 -C -i data.tsv
    dxc-diagram -n 1 3 -W 4 -L 10 -tau 2 -M 500 -parallel -i data.csv -s c -o pvalues.csv
"""

import argparse
import sys
from typing import List, Optional

from .diagram.workflow import run_dxc_workflow, DEFAULT_N_SURROGATES
from .surrogates.generators import DEFAULT_TOLERANCE, DEFAULT_MAX_ITER
from .tables import load_sequences, save_diagram, separator_from_code


def build_parser() -> argparse.ArgumentParser:
    """Argument parser using the historical single-dash option names."""
    parser = argparse.ArgumentParser(
        prog='dxc-diagram',
        description="Correlation diagram and surrogate p-value diagram of two sequences",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        allow_abbrev=False,
        epilog="""
Sequences are the columns of the input table. The output is one row per
window width (L, 2L, ..., W*L), entries ordered by window center.

Example:
  dxc-diagram -n 1 2 -W 5 -L 20 -i data.tsv -o pvalues.tsv
"""
    )

    mandatory = parser.add_argument_group('mandatory assignment')
    mandatory.add_argument('-n', nargs=2, type=int, metavar='#', dest='columns',
                           help='column numbers (1-based) of the two sequences to be analyzed')
    mandatory.add_argument('-W', type=int, dest='n_widths',
                           help='number of window widths (rows of a correlation diagram)')
    mandatory.add_argument('-L', type=int, dest='base_width',
                           help='base window width in samples (if odd, reduced by 1)')

    options = parser.add_argument_group('options')
    options.add_argument('-C', '-c', action='store_true', dest='correlation_only',
                         help='only compute the correlation diagram')
    options.add_argument('-p', action='store_true', dest='pvalue',
                         help='compute the p value diagram by surrogate generation (default)')
    options.add_argument('-M', type=int, default=DEFAULT_N_SURROGATES, dest='n_surrogates',
                         help=f'number of surrogates to be generated (default = {DEFAULT_N_SURROGATES})')
    options.add_argument('-tau', type=int, default=0, dest='tau',
                         help='average the cross-correlations at delays +tau and -tau')
    options.add_argument('-parallel', action='store_true', dest='parallel',
                         help='enable parallel computing')
    options.add_argument('-j', '--jobs', type=int, default=None, dest='n_jobs',
                         help='number of parallel workers (default: all CPUs)')
    options.add_argument('--seed', type=int, default=None,
                         help='base seed of the surrogate generator (default: clock)')
    options.add_argument('--tolerance', type=float, default=DEFAULT_TOLERANCE,
                         help=f'surrogate convergence tolerance in percent (default = {DEFAULT_TOLERANCE})')
    options.add_argument('--max-iter', type=int, default=DEFAULT_MAX_ITER, dest='max_iter',
                         help=f'maximum surrogate iterations (default = {DEFAULT_MAX_ITER})')
    options.add_argument('-v', '--verbose', action='store_true',
                         help='show progress on stderr')

    io = parser.add_argument_group('input/output')
    io.add_argument('-i', dest='input', default=None,
                    help='read from file instead of standard input')
    io.add_argument('-o', dest='output', default=None,
                    help='write to file instead of standard output')
    io.add_argument('-s', dest='separator', default='t',
                    help='column separator: t (TAB, default), s (space) or c (comma)')

    return parser


def _error(message: str) -> int:
    print(f"ERROR: {message}", file=sys.stderr)
    return 1


def main(argv: Optional[List[str]] = None) -> int:
    """Run the command line program and return the exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)
    hint = f"Use {parser.prog} -h for a list of options."

    if args.columns is None or min(args.columns) <= 0:
        return _error(f"column numbers were not correctly set. {hint}")
    if args.n_widths is None or args.n_widths <= 0:
        return _error(f"number of window widths was not correctly set. {hint}")
    if args.base_width is None or args.base_width <= 0:
        return _error(f"base width was not correctly set. {hint}")

    # -p wins when both diagrams are requested
    output = "correlation" if args.correlation_only and not args.pvalue else "pvalue"
    separator = separator_from_code(args.separator)

    try:
        data = load_sequences(args.input, separator=separator)
    except OSError:
        return _error(f"cannot read the selected file '{args.input}'.")
    except ValueError as e:
        return _error(str(e))

    index_a, index_b = (c - 1 for c in args.columns)

    try:
        diagram = run_dxc_workflow(
            data, index_a, index_b,
            n_widths=args.n_widths,
            base_width=args.base_width,
            tau=args.tau,
            output=output,
            n_surrogates=args.n_surrogates,
            parallel=args.parallel,
            n_jobs=args.n_jobs,
            seed=args.seed,
            tolerance=args.tolerance,
            max_iter=args.max_iter,
            verbose=args.verbose,
        )
    except ValueError as e:
        return _error(str(e))

    try:
        save_diagram(diagram, args.output, separator=separator)
    except OSError:
        return _error(f"i/o error when writing data on file '{args.output}'. Please check permissions.")

    return 0


if __name__ == "__main__":
    sys.exit(main())
