"""CLI Argument Parsing"""

import argparse
import argcomplete

from lazy_commit import __version__

EPILOG = """\
To remember choices, add 'r' to your selection (e.g., "1r")
To skip prompts in future, add 's' to your selection (e.g., "2s")

During operation:
  Type 'q' at any prompt to quit
  Press CTRL+C to exit
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='lazy-commit',
        description='Lazy Commit - AI-powered commit message generator',
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument('-v', '--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('-r', '--reset-config', action='store_true', help='Reset configuration and preferences')
    parser.add_argument('--verbose', action='store_true', help='Show debug info (prompt size, timings, tokens used)')
    parser.add_argument('--no-banner', action='store_true', help='Do not print the startup banner')

    argcomplete.autocomplete(parser)
    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse known flags. Anything else is ignored and the interactive loop runs."""
    args, _unknown = build_parser().parse_known_args(argv)
    return args
