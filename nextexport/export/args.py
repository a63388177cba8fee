"""
Declarative option parsing for export subcommands.

An ``OptionSpec`` names each long flag with its value type plus the short
aliases that map onto it; ``parse_args`` turns a raw argv list into
``ParsedArgs`` using ``argparse`` underneath.
"""

from __future__ import annotations

import argparse
import enum
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from nextexport.exceptions import ArgumentParseError, UnknownOptionError


class OptionType(enum.Enum):
    BOOLEAN = "boolean"
    STRING = "string"
    NUMBER = "number"


Boolean = OptionType.BOOLEAN
String = OptionType.STRING
Number = OptionType.NUMBER


def _number(value: str) -> int | float:
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a number, got {value!r}") from None
    if number.is_integer():
        return int(number)
    return number


@dataclass(frozen=True)
class OptionSpec:
    """Declared flags (long form to type) and their short aliases."""

    types: Mapping[str, OptionType]
    aliases: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for flag in self.types:
            if not flag.startswith("--") or len(flag) < 3:
                raise ValueError(f"Option {flag!r} must be a long flag like '--name'")
        for alias, target in self.aliases.items():
            if not alias.startswith("-") or alias.startswith("--"):
                raise ValueError(f"Alias {alias!r} must be a short flag like '-n'")
            if target not in self.types:
                raise ValueError(f"Alias {alias!r} references undeclared option {target!r}")
        object.__setattr__(self, "types", MappingProxyType(dict(self.types)))
        object.__setattr__(self, "aliases", MappingProxyType(dict(self.aliases)))

    def aliases_for(self, flag: str) -> list[str]:
        return [alias for alias, target in self.aliases.items() if target == flag]


@dataclass(frozen=True)
class ParsedArgs:
    """Supplied flags keyed by long name, plus positionals in order."""

    flags: Mapping[str, Any] = field(default_factory=dict)
    positionals: tuple[str, ...] = ()

    def __contains__(self, flag: str) -> bool:
        return flag in self.flags

    def __getitem__(self, flag: str) -> Any:
        return self.flags[flag]

    def get(self, flag: str, default: Any = None) -> Any:
        return self.flags.get(flag, default)

    @property
    def first_positional(self) -> str | None:
        return self.positionals[0] if self.positionals else None


class _RaisingArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises instead of printing usage and exiting."""

    def error(self, message: str):
        raise ArgumentParseError(message)


def _dest(flag: str) -> str:
    return flag[2:].replace("-", "_")


def _build_parser(spec: OptionSpec) -> tuple[argparse.ArgumentParser, dict[str, str]]:
    parser = _RaisingArgumentParser(add_help=False, allow_abbrev=False)
    dest_to_flag: dict[str, str] = {}
    for flag, option_type in spec.types.items():
        names = [*spec.aliases_for(flag), flag]
        dest = _dest(flag)
        dest_to_flag[dest] = flag
        if option_type is OptionType.BOOLEAN:
            parser.add_argument(*names, dest=dest, action="store_true", default=argparse.SUPPRESS)
        elif option_type is OptionType.NUMBER:
            parser.add_argument(*names, dest=dest, type=_number, default=argparse.SUPPRESS)
        else:
            parser.add_argument(*names, dest=dest, default=argparse.SUPPRESS)
    parser.add_argument("_positionals", nargs="*")
    return parser, dest_to_flag


def _split_short_groups(spec: OptionSpec, argv: Sequence[str]) -> list[str]:
    """Expand grouped boolean aliases (``-sh``) into separate tokens.

    Expansion stops at the first letter that is not a boolean alias. A
    declared value alias takes the rest of the group as its value
    (``-sodist`` becomes ``-s -o dist``); any other letter becomes its own
    token so it is reported as an unknown option.
    """
    boolean_letters = {
        alias[1:] for alias, flag in spec.aliases.items() if spec.types[flag] is Boolean
    }
    expanded: list[str] = []
    tokens = iter(argv)
    for token in tokens:
        if token == "--":
            expanded.append(token)
            expanded.extend(tokens)
            break
        if token.startswith("--") or len(token) < 3 or token[0] != "-" or token[1] not in boolean_letters:
            expanded.append(token)
            continue
        letters = token[1:]
        while letters and letters[0] in boolean_letters:
            expanded.append(f"-{letters[0]}")
            letters = letters[1:]
        if not letters:
            continue
        if f"-{letters[0]}" in spec.aliases:
            expanded.append(f"-{letters[0]}")
            if letters[1:]:
                expanded.append(letters[1:].removeprefix("="))
        else:
            expanded.extend(f"-{letter}" for letter in letters)
    return expanded


def parse_args(spec: OptionSpec, argv: Sequence[str]) -> ParsedArgs:
    """Parse ``argv`` against ``spec``.

    Raises:
        UnknownOptionError: for the first option not declared in ``spec``.
        ArgumentParseError: for any other malformed input.
    """
    parser, dest_to_flag = _build_parser(spec)
    namespace, extras = parser.parse_known_intermixed_args(_split_short_groups(spec, argv))

    positionals = list(getattr(namespace, "_positionals", None) or [])
    for extra in extras:
        if extra.startswith("-") and extra != "-":
            raise UnknownOptionError(extra.split("=", 1)[0] if extra.startswith("--") else extra)
        positionals.append(extra)

    flags = {
        dest_to_flag[dest]: value
        for dest, value in vars(namespace).items()
        if dest in dest_to_flag
    }
    return ParsedArgs(flags=flags, positionals=tuple(positionals))


EXPORT_OPTION_SPEC = OptionSpec(
    types={
        "--help": Boolean,
        "--silent": Boolean,
        "--outdir": String,
        "--threads": Number,
    },
    aliases={
        "-h": "--help",
        "-s": "--silent",
        "-o": "--outdir",
    },
)
