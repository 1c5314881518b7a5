"""Command-line parsing for custom commands."""

from __future__ import annotations

from kota.exceptions import ParseError, ParseErrorKind


def parse_command(line: str) -> tuple[str, dict[str, str]]:
    """Split a command invocation into its name and arguments.

    Supported forms::

        fix                         -> ("fix", {})
        review file=a.rs mode=deep  -> ("review", {"file": "a.rs", "mode": "deep"})
        greet alice bob             -> ("greet", {"1": "alice", "2": "bob"})

    Positional arguments are numbered from 1 among positional tokens only.
    Later duplicates overwrite earlier ones.

    Raises:
        ParseError: if the line holds no tokens.
    """
    tokens = line.split()
    if not tokens:
        raise ParseError(ParseErrorKind.EMPTY)

    name, *rest = tokens
    args: dict[str, str] = {}
    position = 1

    for token in rest:
        key, sep, value = token.partition("=")
        if sep:
            args[key] = value
        else:
            args[str(position)] = token
            position += 1

    return name, args
