"""lineshell - engine for interactive line-oriented command shells"""

from .version import __version__, __status__
from .command_table import Arity, CommandDescriptor, CommandTable
from .evaluator import Continuation, Outcome, evaluate
from .exceptions import (
    ArgumentCountError,
    ConfigurationError,
    DuplicateCommand,
    HandlerError,
    InvalidHistory,
    LineShellException,
    RegistrationError,
    ShellIOError,
    TokenizationError,
    UnknownCommand,
)
from .history import HistoryBuffer, HistoryEntry
from .shell import RunStatus, Shell, ShellState
from .shell_io import MemoryIO, ShellIO, StreamIO, TerminalIO

__all__ = [
    '__version__', '__status__',
    'Arity', 'CommandDescriptor', 'CommandTable',
    'Continuation', 'Outcome', 'evaluate',
    'ArgumentCountError', 'ConfigurationError', 'DuplicateCommand', 'HandlerError',
    'InvalidHistory', 'LineShellException', 'RegistrationError', 'ShellIOError',
    'TokenizationError', 'UnknownCommand',
    'HistoryBuffer', 'HistoryEntry',
    'RunStatus', 'Shell', 'ShellState',
    'MemoryIO', 'ShellIO', 'StreamIO', 'TerminalIO',
]
