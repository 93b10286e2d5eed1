#!/usr/bin/env python3
"""
Line evaluation for lineshell.

``evaluate`` turns one raw input line into an Outcome: it records history,
tokenizes, resolves the command, checks the argument count, calls the
handler and converts dispatch-time errors into reported text on the sink.
Stream failures (ShellIOError) are never caught here.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, List, Optional

from .exceptions import (
    ArgumentCountError,
    HandlerError,
    LineShellException,
    ShellIOError,
    UnknownCommand,
)
from .logger import logger
from .tokenizer import strip_terminators, tokenize
from .ui.output import format_error

if TYPE_CHECKING:
    from .shell import Shell
    from .shell_io import ShellIO

log = logger.get_logger("evaluator")


class Continuation(Enum):
    CONTINUE = "continue"
    QUIT = "quit"


@dataclass
class Outcome:
    continuation: Continuation = Continuation.CONTINUE
    error: Optional[LineShellException] = None
    command: Optional[str] = None
    args: Optional[List[str]] = None
    dispatched: bool = False

    @property
    def quit(self) -> bool:
        return self.continuation is Continuation.QUIT

    @property
    def ok(self) -> bool:
        return self.error is None


def _as_continuation(result) -> Continuation:
    if isinstance(result, Continuation):
        return result
    if result is None:
        return Continuation.CONTINUE
    raise HandlerError(f"Handler returned {result!r} instead of a Continuation")


def _report(io: "ShellIO", shell: "Shell", outcome: Outcome, error: LineShellException) -> Outcome:
    outcome.error = error
    io.write(format_error(error, shell.error_prefix))
    if isinstance(error, HandlerError) and error.fatal:
        log.warning(f"Fatal handler error in '{outcome.command}': {error.message}")
        outcome.continuation = Continuation.QUIT
    else:
        log.info(f"{error.code}: {error.message}")
    return outcome


def evaluate(shell: "Shell", line: str, io: "ShellIO", record: bool = True) -> Outcome:
    """Evaluate one raw line against the shell's table, history and state"""
    line = strip_terminators(line)
    outcome = Outcome()
    if not line.strip():
        return outcome

    if record and shell.history_enabled:
        shell.history.append(line)

    try:
        tokens = tokenize(line)
    except LineShellException as e:
        return _report(io, shell, outcome, e)
    if not tokens:
        return outcome

    name, args = tokens[0], tokens[1:]
    outcome.command = name
    outcome.args = args

    descriptor = shell.table.lookup(name)
    try:
        if descriptor is None:
            default = shell.table.default
            if default is None:
                raise UnknownCommand(name)
            log.debug(f"No command '{name}', using default handler")
            outcome.dispatched = True
            result = default(io, shell.data, tokens)
        else:
            if not descriptor.arity.accepts(len(args)):
                raise ArgumentCountError(name, descriptor.arity, len(args))
            log.debug(f"Dispatching '{name}' with {len(args)} argument(s)")
            outcome.dispatched = True
            target = shell if descriptor.takes_shell else shell.data
            result = descriptor.handler(io, target, args)
        outcome.continuation = _as_continuation(result)
    except ShellIOError:
        raise
    except HandlerError as e:
        if e.command is None:
            e.command = name
            e.details["command"] = name
        return _report(io, shell, outcome, e)
    except LineShellException as e:
        return _report(io, shell, outcome, e)
    except Exception as e:
        log.debug(f"Handler '{name}' raised {type(e).__name__}", exc_info=True)
        return _report(io, shell, outcome, HandlerError(str(e) or type(e).__name__, command=name))
    return outcome
