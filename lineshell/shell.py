#!/usr/bin/env python3
"""
lineshell Shell Engine

Owns the command table, the history buffer, the shared application state
and the prompt, and runs the read / evaluate loop over a ShellIO.

    shell = Shell([])
    shell.register("push", "Add string to the list", Arity.at_least(1), push)
    shell.run(StreamIO())
"""

from __future__ import annotations

import copy
from enum import Enum
from typing import Any, Callable, Generic, Optional, Sequence, TypeVar, Union

from .command_table import Arity, CommandListing, CommandTable
from .config import config
from .evaluator import Continuation, Outcome, evaluate
from .exceptions import (
    HandlerError,
    InvalidHistory,
    LineShellException,
    RegistrationError,
    ShellIOError,
    TokenizationError,
)
from .history import HistoryBuffer
from .logger import logger
from .shell_io import ShellIO
from .tokenizer import tokenize
from .ui.output import format_help, format_history

log = logger.get_logger("shell")

T = TypeVar("T")

Prompt = Union[str, Callable[[Any], str]]


class ShellState(Enum):
    AWAITING_LINE = "awaiting_line"
    DISPATCHING = "dispatching"
    HALTED = "halted"


class RunStatus(Enum):
    END_OF_INPUT = "end_of_input"
    QUIT = "quit"


# ---------------------------------------------------------------------------
# Built-in commands
# ---------------------------------------------------------------------------


def _help_cmd(io: ShellIO, shell: "Shell", args: Sequence[str]):
    io.write(format_help(shell.list_commands()))


def _quit_cmd(io: ShellIO, shell: "Shell", args: Sequence[str]):
    return Continuation.QUIT


def _history_cmd(io: ShellIO, shell: "Shell", args: Sequence[str]):
    if not args:
        io.write(format_history(shell.history))
        return None
    if len(args) > 1:
        raise HandlerError("Usage: history [n]")
    try:
        index = int(args[0])
    except ValueError:
        raise InvalidHistory(args[0], f"Invalid history entry {args[0]}") from None
    entry = shell.history.get(index)
    if entry is None:
        raise InvalidHistory(index)

    # Replaying a history command could loop forever; refuse it outright
    replayed = shell.table.lookup(_command_name(entry.line))
    if replayed is not None and replayed.handler is _history_cmd:
        raise InvalidHistory(index, f"History entry {index} is itself a history command")

    outcome = shell.eval_line(entry.line, io, record=False)
    return outcome.continuation


def _command_name(line: str) -> Optional[str]:
    try:
        tokens = tokenize(line)
    except TokenizationError:
        return None
    return tokens[0] if tokens else None


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


class Shell(Generic[T]):
    """Line-oriented command shell over application state of type T"""

    def __init__(self, data: T = None, prompt: Optional[str] = None,
                 history: Optional[bool] = None, history_capacity: Optional[int] = None):
        if prompt is None or history_capacity is None:
            config.validate_shell()

        self.data = data
        self.table = CommandTable()
        self.state = ShellState.HALTED
        self.error_prefix = config.get("shell.error_prefix", "Error: ")

        self._prompt: Prompt = prompt if prompt is not None else config.get("shell.prompt", ">")
        self._history_capacity = (
            history_capacity if history_capacity is not None
            else config.get("shell.history_capacity", 0)
        )
        self.history = HistoryBuffer(self._history_capacity)
        self.history_enabled = False
        self._running = False

        self.table.register_builtin("help", "Print this help", Arity.none(), _help_cmd)
        self.table.register_builtin("quit", "Quit", Arity.none(), _quit_cmd)
        if history is None:
            history = config.get("shell.history", True)
        if history:
            self.enable_history()

    # -- registration -------------------------------------------------------

    def _check_not_running(self, what: str):
        if self._running:
            raise RegistrationError(f"Cannot {what} while the shell is running")

    def register(self, name: str, help: str, arity, handler):
        """Register handler(io, state, args) under name"""
        self._check_not_running("register commands")
        descriptor = self.table.register(name, help, arity, handler)
        log.debug(f"Registered command '{name}' ({descriptor.arity.describe()} args)")
        return descriptor

    def register_shell_command(self, name: str, help: str, arity, handler):
        """Register handler(io, shell, args); the handler gets the engine itself"""
        self._check_not_running("register commands")
        return self.table.register(name, help, arity, handler, takes_shell=True)

    def command(self, name: Optional[str] = None, help: Optional[str] = None, arity=None):
        """Decorator variant of register"""
        def decorator(func):
            doc = (func.__doc__ or "").strip().splitlines()
            self.register(name or func.__name__, help if help is not None else (doc[0] if doc else ""),
                          arity, func)
            return func
        return decorator

    def set_default(self, handler):
        """Handler(io, state, tokens) for lines whose command is not registered"""
        self._check_not_running("change the default handler")
        self.table.register_default(handler)

    register_default = set_default

    def set_prompt(self, prompt: str):
        self._prompt = prompt

    def set_dynamic_prompt(self, func: Callable[[T], str]):
        self._prompt = func

    def enable_history(self):
        self._check_not_running("toggle history")
        self.history_enabled = True
        self.table.register_builtin(
            "history", "Print commands history or run a command from it",
            Arity.at_least(0), _history_cmd,
        )

    def disable_history(self):
        self._check_not_running("toggle history")
        self.history_enabled = False
        self.table.remove_builtin("history")

    # -- queries ------------------------------------------------------------

    def list_commands(self) -> CommandListing:
        return self.table.list()

    def current_prompt(self) -> str:
        if callable(self._prompt):
            return str(self._prompt(self.data))
        return self._prompt

    @property
    def running(self) -> bool:
        return self._running

    # -- evaluation ---------------------------------------------------------

    def eval_line(self, line: str, io: ShellIO, record: bool = True) -> Outcome:
        """Evaluate a single line outside of (or from within) the run loop"""
        return evaluate(self, line, io, record)

    def run(self, io: ShellIO) -> RunStatus:
        """Read and dispatch lines until quit or end-of-input"""
        if self._running:
            raise LineShellException("Shell is already running", "SHELL_RUNNING")
        self._running = True
        self.state = ShellState.AWAITING_LINE
        status = RunStatus.END_OF_INPUT
        log.debug("Shell loop started")
        try:
            while self.state is not ShellState.HALTED:
                io.prompt(self.current_prompt())
                line = io.read_line()
                if line is None:
                    log.debug("End of input")
                    self.state = ShellState.HALTED
                    break

                self.state = ShellState.DISPATCHING
                outcome = evaluate(self, line, io)
                io.flush()
                if outcome.quit:
                    status = RunStatus.QUIT
                    self.state = ShellState.HALTED
                else:
                    self.state = ShellState.AWAITING_LINE
        except ShellIOError as e:
            log.error(f"Shell loop aborted: {e.message}")
            raise
        finally:
            self.state = ShellState.HALTED
            self._running = False
        log.debug(f"Shell loop halted ({status.value})")
        return status

    # -- cloning ------------------------------------------------------------

    def clone(self, duplicate: Callable[[T], T] = copy.deepcopy) -> "Shell[T]":
        """
        New independent shell: same commands and prompt, a fresh empty
        history, and ``duplicate(self.data)`` as its state.

        Data that must stay shared between clones should be wrapped by the
        caller in its own synchronized container; pass ``duplicate=lambda d: d``
        to hand that container to the clone as is.
        """
        other = type(self).__new__(type(self))
        other.__dict__.update(self.__dict__)
        other.data = duplicate(self.data)
        other.table = self.table.copy()
        other.state = ShellState.HALTED
        other.history = HistoryBuffer(self._history_capacity)
        other._running = False
        return other

    def __repr__(self):
        return f"<Shell commands={len(self.table)} state={self.state.value}>"
