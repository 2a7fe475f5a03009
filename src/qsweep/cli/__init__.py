"""
Command-line interface for qsweep.

Usage:
    qsweep list
    qsweep simulate grover/5 --seed 1
    qsweep counts qpe/8
    qsweep --log-level debug counts vqe/lih

Every command prints JSON on stdout.
"""
import argparse
import json
import sys
from dataclasses import asdict


def cmd_list(args):
    """List the available entry operations."""
    from .. import driver

    return {"entries": list(driver.ENTRY_POINTS)}


def cmd_simulate(args):
    """Simulate one entry and print its readout."""
    from .. import driver

    result = driver.simulate(args.key, seed=args.seed)
    return {"key": args.key, "seed": args.seed, **asdict(result)}


def cmd_counts(args):
    """Print the logical resource counts of one entry."""
    from .. import driver

    counts = driver.logical_counts(args.key)
    return {"key": args.key, **counts.to_dict()}


def build_parser():
    parser = argparse.ArgumentParser(
        prog='qsweep',
        description='Parametric quantum circuit sweeps for resource estimation'
    )
    parser.add_argument('--log-level', default='warning',
                        choices=['debug', 'info', 'warning', 'error'],
                        help='Logging level for qsweep messages')
    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # List command
    list_parser = subparsers.add_parser('list', help='List entry operations')
    list_parser.set_defaults(func=cmd_list)

    # Simulate command
    sim_parser = subparsers.add_parser('simulate', help='Simulate one entry')
    sim_parser.add_argument('key', help='Entry key, e.g. "grover/5"')
    sim_parser.add_argument('--seed', type=int, default=None, help='Measurement seed')
    sim_parser.set_defaults(func=cmd_simulate)

    # Counts command
    counts_parser = subparsers.add_parser('counts', help='Logical gate and qubit counts')
    counts_parser.add_argument('key', help='Entry key, e.g. "qpe/8"')
    counts_parser.set_defaults(func=cmd_counts)

    return parser


def main(argv=None):
    """Main CLI entry point."""
    from ..config import configure_logging
    from ..errors import QSweepError

    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    configure_logging(args.log_level)
    try:
        payload = args.func(args)
    except (KeyError, QSweepError) as exc:
        print(f"qsweep: error: {exc}", file=sys.stderr)
        return 2

    json.dump(payload, sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == '__main__':
    sys.exit(main())
