"""
Top-level command dispatcher.

Usage:
  nextexport export [options] <dir>
  nextexport --version
"""

from __future__ import annotations

import sys
from collections.abc import Callable, Sequence

from nextexport import __version__
from nextexport.export.command import main as export_main

Command = Callable[[Sequence[str]], int]

COMMANDS: dict[str, Command] = {
    "export": export_main,
}

USAGE = """Usage
  $ nextexport <command> [options]

Available commands
  {commands}

Options
  --version, -v   Version number
  --help, -h      Displays this message

For more information run a command with the --help flag
  $ nextexport export --help
"""


def _usage() -> str:
    return USAGE.format(commands=", ".join(sorted(COMMANDS)))


def main(argv: Sequence[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)

    if not argv or argv[0] in ("--help", "-h"):
        print(_usage())
        return 0
    if argv[0] in ("--version", "-v"):
        print(f"nextexport v{__version__}")
        return 0

    name, rest = argv[0], argv[1:]
    command = COMMANDS.get(name)
    if command is None:
        print(f"Invalid command: {name}", file=sys.stderr)
        print(_usage(), file=sys.stderr)
        return 1
    return command(rest)


if __name__ == "__main__":
    raise SystemExit(main())
