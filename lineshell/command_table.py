#!/usr/bin/env python3
"""
Command table for lineshell.

Maps command names to immutable descriptors. Host commands and built-in
commands live side by side; a host command registered under a built-in
name shadows the built-in for both dispatch and listing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, Optional, Sequence, Tuple, Union

from .exceptions import DuplicateCommand, RegistrationError


Handler = Callable[[Any, Any, Sequence[str]], Any]


# ---------------------------------------------------------------------------
# Arity
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Arity:
    """Accepted argument-count policy of a command"""

    kind: str  # none | exact | at_least
    count: int = 0

    NONE = "none"
    EXACT = "exact"
    AT_LEAST = "at_least"

    @classmethod
    def none(cls) -> "Arity":
        return cls(cls.NONE, 0)

    @classmethod
    def exact(cls, n: int) -> "Arity":
        if n < 0:
            raise ValueError("argument count must be non-negative")
        return cls(cls.EXACT, n)

    @classmethod
    def at_least(cls, n: int) -> "Arity":
        if n < 0:
            raise ValueError("argument count must be non-negative")
        return cls(cls.AT_LEAST, n)

    @classmethod
    def coerce(cls, value: Union["Arity", int, None]) -> "Arity":
        """Accept an Arity, None (no arguments) or an int (minimum count)"""
        if isinstance(value, Arity):
            return value
        if value is None:
            return cls.none()
        if isinstance(value, int) and not isinstance(value, bool):
            return cls.at_least(value)
        raise RegistrationError(f"Invalid arity: {value!r}")

    def accepts(self, actual: int) -> bool:
        if self.kind == self.AT_LEAST:
            return actual >= self.count
        return actual == self.count

    def describe(self) -> str:
        if self.kind == self.NONE:
            return "no"
        if self.kind == self.EXACT:
            return f"exactly {self.count}"
        return f"at least {self.count}"


# ---------------------------------------------------------------------------
# Descriptors
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CommandDescriptor:
    name: str
    help: str
    arity: Arity
    handler: Handler
    # Shell commands receive the engine itself instead of the shared state
    takes_shell: bool = False
    builtin: bool = False

    def help_row(self) -> Tuple[str, str]:
        return self.name, self.help


def validate_name(name: str) -> str:
    if not isinstance(name, str) or not name:
        raise RegistrationError("Command name must be a non-empty string", name)
    if any(ch.isspace() for ch in name):
        raise RegistrationError(f"Command name '{name}' must not contain whitespace", name)
    return name


class CommandListing:
    """Restartable, sorted view of (name, help) pairs"""

    def __init__(self, table: "CommandTable"):
        self._table = table

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        merged = self._table._visible()
        for name in sorted(merged):
            yield merged[name].help_row()

    def names(self):
        return [name for name, _ in self]


class CommandTable:
    """Ordered mapping of command name to CommandDescriptor"""

    def __init__(self):
        self._commands: Dict[str, CommandDescriptor] = {}
        self._builtins: Dict[str, CommandDescriptor] = {}
        self.default: Optional[Handler] = None

    def register(self, name: str, help: str, arity, handler: Handler,
                 takes_shell: bool = False) -> CommandDescriptor:
        validate_name(name)
        if not callable(handler):
            raise RegistrationError(f"Handler for '{name}' is not callable", name)
        if name in self._commands:
            raise DuplicateCommand(name)
        descriptor = CommandDescriptor(
            name=name,
            help=help or "",
            arity=Arity.coerce(arity),
            handler=handler,
            takes_shell=takes_shell,
        )
        self._commands[name] = descriptor
        return descriptor

    def register_builtin(self, name: str, help: str, arity, handler: Handler) -> CommandDescriptor:
        descriptor = CommandDescriptor(
            name=validate_name(name),
            help=help,
            arity=Arity.coerce(arity),
            handler=handler,
            takes_shell=True,
            builtin=True,
        )
        self._builtins[name] = descriptor
        return descriptor

    def remove_builtin(self, name: str) -> None:
        self._builtins.pop(name, None)

    def register_default(self, handler: Handler) -> None:
        if handler is not None and not callable(handler):
            raise RegistrationError("Default handler is not callable")
        self.default = handler

    def lookup(self, name: str) -> Optional[CommandDescriptor]:
        descriptor = self._commands.get(name)
        if descriptor is None:
            descriptor = self._builtins.get(name)
        return descriptor

    def _visible(self) -> Dict[str, CommandDescriptor]:
        merged = dict(self._builtins)
        merged.update(self._commands)
        return merged

    def list(self) -> CommandListing:
        return CommandListing(self)

    def copy(self) -> "CommandTable":
        """Copy of the table; descriptors are immutable and shared"""
        table = CommandTable()
        table._commands = dict(self._commands)
        table._builtins = dict(self._builtins)
        table.default = self.default
        return table

    def __contains__(self, name) -> bool:
        return name in self._commands or name in self._builtins

    def __len__(self) -> int:
        return len(self._visible())
