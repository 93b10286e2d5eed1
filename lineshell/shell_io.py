#!/usr/bin/env python3
"""
lineshell I/O Abstraction
One "read a line" / "write output" capability in front of any stream, so the
same engine drives a terminal, a socket, a pipe or an in-memory buffer.
"""

from __future__ import annotations

import io
import sys
from abc import ABC, abstractmethod
from typing import IO, Iterable, List, Optional, Union

from prompt_toolkit import PromptSession
from prompt_toolkit.auto_suggest import AutoSuggestFromHistory
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.history import InMemoryHistory

from .exceptions import ShellIOError
from .logger import logger
from .tokenizer import strip_terminators

log = logger.get_logger("io")

Data = Union[str, bytes]


def _is_binary(stream) -> bool:
    if isinstance(stream, io.TextIOBase):
        return False
    if isinstance(stream, (io.RawIOBase, io.BufferedIOBase)):
        return True
    return "b" in getattr(stream, "mode", "")


class ShellIO(ABC):
    """Base class for everything a shell can read lines from and write to"""

    encoding = "utf-8"

    @abstractmethod
    def read_line(self) -> Optional[str]:
        """Return the next line without its terminator, or None at end-of-input"""

    @abstractmethod
    def write(self, data: Data) -> None:
        pass

    def flush(self) -> None:
        pass

    def prompt(self, text: str) -> None:
        """Show the prompt before a blocking read"""
        if text:
            self.write(text if text[-1].isspace() else f"{text} ")
        self.flush()

    def writeln(self, data: Data = "") -> None:
        if isinstance(data, bytes):
            data = data.decode(self.encoding, errors="replace")
        self.write(f"{data}\n")

    def _text(self, data: Data) -> str:
        if isinstance(data, bytes):
            return data.decode(self.encoding, errors="replace")
        return str(data)


class MemoryIO(ShellIO):
    """
    Feeds a fixed sequence of lines and captures everything written.

    Prompts are recorded in ``prompts`` and kept out of ``output`` unless
    ``echo_prompts`` is set.
    """

    def __init__(self, lines: Iterable[str] = (), echo_prompts: bool = False):
        self._pending: List[str] = list(lines)
        self._chunks: List[str] = []
        self.prompts: List[str] = []
        self.echo_prompts = echo_prompts
        self.reads = 0

    def feed(self, *lines: str) -> None:
        self._pending.extend(lines)

    def read_line(self) -> Optional[str]:
        if not self._pending:
            return None
        self.reads += 1
        return strip_terminators(self._pending.pop(0))

    def write(self, data: Data) -> None:
        self._chunks.append(self._text(data))

    def prompt(self, text: str) -> None:
        self.prompts.append(text)
        if self.echo_prompts:
            self.write(text)

    @property
    def output(self) -> str:
        return "".join(self._chunks)

    def lines(self) -> List[str]:
        return self.output.splitlines()

    def clear(self) -> None:
        self._chunks.clear()


class StreamIO(ShellIO):
    """
    Wraps a pair of file-like objects: stdin/stdout, ``socket.makefile``
    handles, pipes. Either side may be in text or binary mode.
    """

    def __init__(self, reader: IO = None, writer: IO = None, encoding: str = "utf-8"):
        self.reader = reader if reader is not None else sys.stdin
        self.writer = writer if writer is not None else sys.stdout
        self.encoding = encoding

    def read_line(self) -> Optional[str]:
        try:
            line = self.reader.readline()
        except (OSError, ValueError) as e:
            log.error(f"Read failed: {e}")
            raise ShellIOError(f"Read failed: {e}", "read") from e
        if not line:
            return None
        if isinstance(line, bytes):
            line = line.decode(self.encoding, errors="replace")
        return strip_terminators(line)

    def write(self, data: Data) -> None:
        try:
            if _is_binary(self.writer):
                if isinstance(data, str):
                    data = data.encode(self.encoding)
                self.writer.write(data)
            else:
                self.writer.write(self._text(data))
            self.writer.flush()
        except (OSError, ValueError) as e:
            log.error(f"Write failed: {e}")
            raise ShellIOError(f"Write failed: {e}", "write") from e

    def flush(self) -> None:
        try:
            self.writer.flush()
        except (OSError, ValueError) as e:
            raise ShellIOError(f"Flush failed: {e}", "flush") from e

    def close(self) -> None:
        for stream in (self.reader, self.writer):
            try:
                stream.close()
            except OSError as e:
                log.debug(f"Ignoring close failure: {e}")


class TerminalIO(ShellIO):
    """
    Live terminal backed by a prompt_toolkit session. Line editing, history
    navigation and completion rendering are all prompt_toolkit's.
    """

    def __init__(self, completions: Iterable[str] = (), output: IO = None,
                 session: PromptSession = None):
        self.output = output if output is not None else sys.stdout
        words = sorted(set(completions))
        self.session = session or PromptSession(
            history=InMemoryHistory(),
            auto_suggest=AutoSuggestFromHistory(),
            completer=WordCompleter(words, sentence=True) if words else None,
        )
        self._prompt_text = ""

    def prompt(self, text: str) -> None:
        # Rendered by prompt_toolkit at read time
        self._prompt_text = f"{text} " if text and not text.endswith(" ") else text

    def read_line(self) -> Optional[str]:
        try:
            line = self.session.prompt(self._prompt_text)
        except EOFError:
            return None
        except KeyboardInterrupt:
            # Ctrl+C abandons the current line only
            return ""
        except OSError as e:
            raise ShellIOError(f"Terminal read failed: {e}", "read") from e
        return strip_terminators(line)

    def write(self, data: Data) -> None:
        try:
            self.output.write(self._text(data))
            self.output.flush()
        except OSError as e:
            raise ShellIOError(f"Terminal write failed: {e}", "write") from e

    def flush(self) -> None:
        try:
            self.output.flush()
        except OSError as e:
            raise ShellIOError(f"Terminal flush failed: {e}", "flush") from e
