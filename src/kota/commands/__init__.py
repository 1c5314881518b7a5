"""User commands: parsing and execution."""

from kota.commands.parser import parse_command
from kota.commands.registry import CommandRegistry

__all__ = ["CommandRegistry", "parse_command"]
