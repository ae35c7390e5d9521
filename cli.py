#!/usr/bin/env python3
"""CLI for the NUnit socket runner and HTML report generator."""

import argparse
import logging
import sys

from core import USAGE, convert_report, resolve_report_paths, run_interactive
from nunit_runner.errors import MalformedInput, UsageError


def setup_logging(verbose: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(levelname)s: %(message)s'
    )


def cmd_report(args):
    """Convert an NUnit XML result file to an HTML page."""
    try:
        input_path, output_path = resolve_report_paths(args.paths)
    except UsageError:
        print(USAGE)
        return 0

    try:
        written = convert_report(input_path, output_path, escape_all=args.escape_all)
    except MalformedInput as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if written:
        print(f"Report: {written}")
    return 0


def cmd_run(_args):
    """Run tests on a remote runner interactively."""
    return run_interactive()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='NUnit socket runner and HTML report generator')
    parser.add_argument('-v', '--verbose', action='store_true')

    sub = parser.add_subparsers(dest='command')

    p = sub.add_parser('report', help='Convert NUnit XML results to HTML')
    p.add_argument('paths', nargs='*', metavar='path', help='input-path [output-path]')
    p.add_argument('--escape-all', action='store_true',
                   help='HTML-escape names and reasons as well as failure details')

    sub.add_parser('run', help='Connect to a remote NUnit runner and run tests')

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    setup_logging(args.verbose)

    cmds = {
        'report': cmd_report,
        'run': cmd_run,
    }
    return cmds[args.command](args)


if __name__ == '__main__':
    sys.exit(main())
