#!/usr/bin/env python3
"""
Bundled demo shells.

Each builder returns a ready-to-run Shell; the host CLI runs them on a
terminal, on plain stdin/stdout, or once per TCP connection.
"""

import threading
from contextlib import contextmanager, nullcontext
from typing import Callable, Dict, List, Optional

from .command_table import Arity
from .shell import Shell


# ---------------------------------------------------------------------------
# hello / list / default
# ---------------------------------------------------------------------------


def build_hello_shell() -> Shell:
    shell = Shell(None)

    def hello(io, _, args):
        io.writeln("Hello World !!!")

    shell.register("hello", "Say 'hello' to the world", Arity.none(), hello)
    return shell


def build_list_shell() -> Shell:
    shell = Shell([])

    def push(io, items, args):
        item = " ".join(args)
        io.writeln(f"Pushing {item}")
        items.append(item)

    def list_items(io, items, args):
        for item in items:
            io.writeln(item)

    shell.register("push", "Add string to the list", Arity.at_least(1), push)
    shell.register("list", "List strings", Arity.none(), list_items)
    return shell


def build_default_shell() -> Shell:
    shell = Shell(None)

    def echo(io, _, tokens):
        io.writeln(f"Hello from default handler !!! Received: {' '.join(tokens)}")

    shell.set_default(echo)
    return shell


# ---------------------------------------------------------------------------
# dynamic prompt
# ---------------------------------------------------------------------------


class PromptEnv:
    def __init__(self, context: Optional[str] = None):
        self.context = context


def context_prompt(env: PromptEnv) -> str:
    if env.context:
        return f"[{env.context}] >"
    return ">"


def build_prompt_shell() -> Shell:
    shell = Shell(PromptEnv())

    def enter(io, env, args):
        env.context = args[0]

    def leave(io, env, args):
        env.context = None

    shell.register("enter", "Enter context", Arity.exact(1), enter)
    shell.register("leave", "Leave current context", Arity.none(), leave)
    shell.set_dynamic_prompt(context_prompt)
    return shell


# ---------------------------------------------------------------------------
# map
# ---------------------------------------------------------------------------


class LockedMap:
    """Dict guarded by a lock, for sharing one map between cloned shells"""

    def __init__(self):
        self.lock = threading.Lock()
        self.items: Dict[int, str] = {}


def _register_map_commands(shell: Shell, access: Callable):
    """access(state) is a context manager yielding the dict to operate on"""

    def put(io, state, args):
        key = int(args[0])
        with access(state) as items:
            items[key] = args[1]

    def get(io, state, args):
        key = int(args[0])
        with access(state) as items:
            value = items.get(key)
        io.writeln(value if value is not None else "Not found")

    def remove(io, state, args):
        key = int(args[0])
        with access(state) as items:
            items.pop(key, None)

    def list_items(io, state, args):
        with access(state) as items:
            rows: List = sorted(items.items())
        for key, value in rows:
            io.writeln(f"{key} = {value}")

    def clear(io, state, args):
        with access(state) as items:
            items.clear()

    shell.register("put", "Insert a value", Arity.exact(2), put)
    shell.register("get", "Get a value", Arity.exact(1), get)
    shell.register("remove", "Remove a value", Arity.exact(1), remove)
    shell.register("list", "List all values", Arity.none(), list_items)
    shell.register("clear", "Clear all values", Arity.none(), clear)


@contextmanager
def _locked(shared: LockedMap):
    with shared.lock:
        yield shared.items


def build_map_shell() -> Shell:
    shell = Shell({})
    _register_map_commands(shell, nullcontext)
    return shell


def build_shared_map_shell(shared: Optional[LockedMap] = None) -> Shell:
    """Map shell whose state is a LockedMap; clone it with duplicate=lambda d: d"""
    shell = Shell(shared if shared is not None else LockedMap())
    _register_map_commands(shell, _locked)
    return shell


DEMOS = {
    "hello": build_hello_shell,
    "list": build_list_shell,
    "map": build_map_shell,
    "prompt": build_prompt_shell,
    "default": build_default_shell,
}
