# cli.py
import argparse
import sys
from typing import Callable, Dict, List, Optional, Sequence

from . import operations
from .config import Config
from .errors import CygpkgError, KEYBOARD_INTERRUPT, SUCCESS, UsageError
from .logger import configure_verbosity, setup_logger
from .operations import Invocation

_logger = setup_logger()

Handler = Callable[[Config, Invocation], int]

HANDLERS: Dict[str, Handler] = {
    "install": operations.install,
    "remove": operations.remove,
    "check": operations.inventory,
    "dump": operations.inventory,
    "list": operations.inventory,
    "find": operations.inventory,
    "query": operations.inventory,
    "search": operations.search,
    "describe": operations.describe,
    "update": operations.update,
}
HELP_COMMANDS = ("usage", "help")
LONG_FLAGS = ("--debug", "--verbose", "--interactive", "--help")
SHORT_FLAG_LETTERS = "dvih"

COMMANDS_HELP = """\
commands:
  search [PATTERN]      list packages in the index whose name matches PATTERN
  describe PACKAGE...   show index entries for PACKAGE(s)
  install PACKAGE...    install PACKAGE(s) from the local package directory
  remove PACKAGE...     remove PACKAGE(s)
  check [PACKAGE...]    check installed PACKAGE(s) for integrity
  dump [PACKAGE...]     show versions of installed PACKAGE(s)
  list [PACKAGE...]     list files owned by PACKAGE(s)
  find FILE             find the package that owns FILE
  query REGEXP          search the package database for REGEXP
  update [MIRROR]       download a fresh package index from MIRROR
  usage, help           show this help
"""


class TokenParser(argparse.ArgumentParser):
    def error(self, message):
        raise UsageError(message)


def build_parser() -> TokenParser:
    parser = TokenParser(
        prog="cygpkg",
        usage="%(prog)s [options] <command> [arguments...]",
        description="Cygwin package manager front-end",
        epilog=COMMANDS_HELP,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
        allow_abbrev=False,
    )
    parser.add_argument("-d", "--debug", action="store_true", help="show debug messages")
    parser.add_argument("-v", "--verbose", action="store_true", help="show status messages")
    parser.add_argument("-i", "--interactive", action="store_true", help="run the installer with its GUI")
    parser.add_argument("-h", "--help", action="store_true", help="show this help")
    return parser


def is_flag(token: str) -> bool:
    """True for tokens argparse should see: known long flags and bundles like -dv."""
    if token in LONG_FLAGS:
        return True
    letters = token[1:]
    return token.startswith("-") and bool(letters) and all(c in SHORT_FLAG_LETTERS for c in letters)


def parse_tokens(tokens: Sequence[str], parser: Optional[argparse.ArgumentParser] = None) -> Invocation:
    """
    Split tokens into flags, the command and its arguments.

    A later command token replaces an earlier one. Tokens that are neither
    flags nor commands, unknown flags included, become arguments in order.
    A help request yields the "help" command regardless of anything else.
    """
    parser = parser or build_parser()
    flags: List[str] = []
    rest: List[str] = []
    for token in tokens:
        (flags if is_flag(token) else rest).append(token)
    opts = parser.parse_args(flags)

    command: Optional[str] = None
    args: List[str] = []
    for token in rest:
        if token in HELP_COMMANDS:
            opts.help = True
        elif token in HANDLERS:
            command = token
        else:
            args.append(token)

    if opts.help:
        command = "help"

    return Invocation(
        command=command,
        args=tuple(args),
        debug=opts.debug,
        verbose=opts.verbose,
        interactive=opts.interactive,
    )


def dispatch(inv: Invocation, config: Optional[Config] = None) -> int:
    if inv.command is None:
        raise UsageError("no command given (try 'cygpkg help')")
    handler = HANDLERS.get(inv.command)
    if handler is None:
        raise UsageError(f"unrecognized command: {inv.command}")

    config = config or Config()
    _logger.debug("Dispatching '%s' with arguments %s", inv.command, list(inv.args))
    return handler(config, inv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    tokens = list(sys.argv[1:] if argv is None else argv)
    parser = build_parser()
    try:
        if not tokens:
            parser.print_help()
            return SUCCESS

        inv = parse_tokens(tokens, parser)
        configure_verbosity(inv.debug, inv.verbose)
        if inv.command == "help":
            parser.print_help()
            return SUCCESS

        return dispatch(inv)
    except CygpkgError as e:
        _logger.error("%s", e)
        return e.exit_code
    except KeyboardInterrupt:
        _logger.warning("Interrupted.")
        return KEYBOARD_INTERRUPT


if __name__ == "__main__":
    sys.exit(main())
