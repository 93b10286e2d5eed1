"""
Tests for single-line evaluation: resolution, arity, error reporting
"""

import pytest
from unittest.mock import Mock

from lineshell.command_table import Arity
from lineshell.evaluator import Continuation, evaluate
from lineshell.exceptions import (
    ArgumentCountError,
    HandlerError,
    ShellIOError,
    TokenizationError,
    UnknownCommand,
)
from lineshell.shell import Shell
from lineshell.shell_io import MemoryIO


@pytest.fixture
def shell():
    return Shell({"count": 0}, prompt=">", history=True, history_capacity=0)


@pytest.fixture
def io():
    return MemoryIO()


class TestResolution:
    def test_noargs_command_invoked_once(self, shell, io):
        handler = Mock(return_value=None)
        shell.register("ping", "Ping", Arity.none(), handler)
        outcome = evaluate(shell, "ping", io)
        handler.assert_called_once_with(io, shell.data, [])
        assert outcome.ok
        assert outcome.dispatched
        assert outcome.continuation is Continuation.CONTINUE

    def test_arguments_passed_in_order(self, shell, io):
        handler = Mock(return_value=None)
        shell.register("put", "Put", Arity.exact(2), handler)
        evaluate(shell, "put 1 'one value'", io)
        handler.assert_called_once_with(io, shell.data, ["1", "one value"])

    def test_unknown_command_reported(self, shell, io):
        before = dict(shell.data)
        outcome = evaluate(shell, "frobnicate now", io)
        assert isinstance(outcome.error, UnknownCommand)
        assert outcome.error.name == "frobnicate"
        assert outcome.continuation is Continuation.CONTINUE
        assert not outcome.dispatched
        assert io.lines() == ["Error: Unknown command frobnicate"]
        assert shell.data == before

    def test_dispatch_is_case_sensitive(self, shell, io):
        shell.register("ping", "Ping", None, Mock(return_value=None))
        outcome = evaluate(shell, "PING", io)
        assert isinstance(outcome.error, UnknownCommand)

    def test_default_handler_receives_tokens(self, shell, io):
        default = Mock(return_value=None)
        shell.set_default(default)
        outcome = evaluate(shell, "anything goes 'here too'", io)
        default.assert_called_once_with(io, shell.data, ["anything", "goes", "here too"])
        assert outcome.ok
        assert outcome.dispatched

    def test_registered_command_wins_over_default(self, shell, io):
        default = Mock(return_value=None)
        handler = Mock(return_value=None)
        shell.set_default(default)
        shell.register("ping", "Ping", None, handler)
        evaluate(shell, "ping", io)
        handler.assert_called_once()
        default.assert_not_called()


class TestArity:
    @pytest.mark.parametrize("line,actual", [("put", 0), ("put a", 1), ("put a b c", 3)])
    def test_exact_mismatch_never_invokes(self, shell, io, line, actual):
        handler = Mock(return_value=None)
        shell.register("put", "Put", Arity.exact(2), handler)
        outcome = evaluate(shell, line, io)
        handler.assert_not_called()
        assert isinstance(outcome.error, ArgumentCountError)
        assert outcome.error.expected == 2
        assert outcome.error.actual == actual
        assert io.lines() == [f"Error: put expects exactly 2 argument(s), got {actual}"]

    def test_at_least(self, shell, io):
        handler = Mock(return_value=None)
        shell.register("push", "Push", Arity.at_least(1), handler)
        assert isinstance(evaluate(shell, "push", io).error, ArgumentCountError)
        assert evaluate(shell, "push a b c", io).ok
        handler.assert_called_once_with(io, shell.data, ["a", "b", "c"])

    def test_noargs_rejects_arguments(self, shell, io):
        handler = Mock(return_value=None)
        shell.register("list", "List", Arity.none(), handler)
        outcome = evaluate(shell, "list extra", io)
        assert outcome.error.expected == 0
        assert outcome.error.actual == 1
        handler.assert_not_called()


class TestHandlerOutcomes:
    def test_quit_continuation(self, shell, io):
        shell.register("stop", "Stop", None, lambda io, data, args: Continuation.QUIT)
        assert evaluate(shell, "stop", io).quit

    def test_handler_error_reported_and_continues(self, shell, io):
        def fail(io, data, args):
            io.writeln("partial output")
            raise HandlerError("could not do it")

        shell.register("fail", "Fail", None, fail)
        outcome = evaluate(shell, "fail", io)
        assert outcome.continuation is Continuation.CONTINUE
        assert outcome.error.command == "fail"
        assert io.lines() == ["partial output", "Error: could not do it"]

    def test_fatal_handler_error_quits(self, shell, io):
        def fatal(io, data, args):
            raise HandlerError("disk on fire", fatal=True)

        shell.register("fatal", "Fatal", None, fatal)
        outcome = evaluate(shell, "fatal", io)
        assert outcome.quit
        assert io.lines() == ["Error: disk on fire"]

    def test_plain_exception_wrapped(self, shell, io):
        def parse(io, data, args):
            data["count"] = int(args[0])

        shell.register("set", "Set count", Arity.exact(1), parse)
        outcome = evaluate(shell, "set nope", io)
        assert isinstance(outcome.error, HandlerError)
        assert not outcome.error.fatal
        assert "invalid literal" in io.output
        assert shell.data["count"] == 0

    def test_io_error_propagates(self, shell, io):
        def broken(io, data, args):
            raise ShellIOError("peer went away", "write")

        shell.register("broken", "Broken", None, broken)
        with pytest.raises(ShellIOError):
            evaluate(shell, "broken", io)

    def test_bad_return_value_reported(self, shell, io):
        shell.register("odd", "Odd", None, lambda io, data, args: 42)
        outcome = evaluate(shell, "odd", io)
        assert isinstance(outcome.error, HandlerError)
        assert outcome.continuation is Continuation.CONTINUE

    def test_state_mutation_persists(self, shell, io):
        def bump(io, data, args):
            data["count"] += 1

        shell.register("bump", "Bump", None, bump)
        evaluate(shell, "bump", io)
        evaluate(shell, "bump", io)
        assert shell.data["count"] == 2

    def test_shell_command_receives_engine(self, shell, io):
        seen = []
        shell.register_shell_command("swap", "Replace state", None,
                                     lambda io, sh, args: seen.append(sh) or setattr(sh, "data", []))
        evaluate(shell, "swap", io)
        assert seen == [shell]
        assert shell.data == []


class TestHistoryRecording:
    def test_empty_lines_not_recorded(self, shell, io):
        for line in ["", "   ", "\n", "\r\n"]:
            outcome = evaluate(shell, line, io)
            assert outcome.continuation is Continuation.CONTINUE
            assert not outcome.dispatched
        assert len(shell.history) == 0
        assert io.output == ""

    def test_every_submitted_line_recorded(self, shell, io):
        shell.register("ok", "Ok", None, lambda io, data, args: None)
        lines = ["ok", "unknown", "ok 'unterminated", "ok extra"]
        for line in lines:
            evaluate(shell, line, io)
        assert [(e.sequence, e.line) for e in shell.history] == list(enumerate(lines, 1))

    def test_tokenization_error_reported(self, shell, io):
        outcome = evaluate(shell, "say 'oops", io)
        assert isinstance(outcome.error, TokenizationError)
        assert io.lines()[0].startswith("Error: Malformed input")

    def test_trailing_terminator_trimmed_before_recording(self, shell, io):
        evaluate(shell, "unknown\r\n", io)
        assert shell.history.get(1).line == "unknown"

    def test_no_recording_when_disabled(self, io):
        shell = Shell(None, history=False)
        evaluate(shell, "anything", io)
        assert len(shell.history) == 0
