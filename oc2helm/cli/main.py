"""Main CLI entry point for oc2helm."""

import argparse
import sys
from typing import Optional

from oc2helm.chart.emitter import DEFAULT_TARGET_DIR
from .commands import convert_templates


USAGE_DESCRIPTION = """\
Provide one or more OpenShift Deployment template files.
The script will generate a Helm chart directory for each
of them based on the basename of the file.
"""


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the oc2helm CLI."""
    parser = argparse.ArgumentParser(
        prog='oc2helm',
        usage='%(prog)s -h | [options] template.yaml [template.yaml ...]',
        description=USAGE_DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        'templates',
        nargs='*',
        metavar='template.yaml',
        help='OpenShift template files to convert'
    )
    parser.add_argument(
        '-t', '--target-dir',
        type=str,
        default=DEFAULT_TARGET_DIR,
        help=f'Directory receiving one chart per template (default: {DEFAULT_TARGET_DIR})'
    )
    parser.add_argument(
        '--no-overrides',
        action='store_true',
        help='Ignore <name>.properties and <name>-common.properties next to the template'
    )
    parser.add_argument(
        '--continue-on-error',
        action='store_true',
        help='Convert remaining templates after a failure (exit status still reports it)'
    )
    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug logging'
    )
    parser.add_argument(
        '--quiet',
        action='store_true',
        help='Suppress non-error output'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable verbose output'
    )
    parser.add_argument(
        '--log-level',
        choices=['debug', 'info', 'warn', 'error'],
        default='info',
        help='Set log level'
    )
    return parser


def main(args: Optional[list] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if not parsed_args.templates:
        print("Missing argument", file=sys.stderr)
        parser.print_help(sys.stderr)
        return 1

    return convert_templates(parsed_args)


if __name__ == '__main__':
    sys.exit(main())
