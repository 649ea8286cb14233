from __future__ import annotations
import time
from dataclasses import dataclass
from typing import Callable, List, Optional

from .environment import Environment
from .values import BooleanVal, NativeFnVal, NullVal, NumberVal, RuntimeVal, render


def _console_read_line() -> Optional[str]:
    try:
        return input()
    except EOFError:
        return None


def _console_timestamp() -> float:
    return time.time() * 1000


@dataclass
class Host:
    """Capabilities the interpreter borrows from the outside world."""

    read_line: Callable[[], Optional[str]]
    write_output: Callable[[str], None]
    current_timestamp: Callable[[], float]

    @classmethod
    def console(cls) -> "Host":
        return cls(
            read_line=_console_read_line,
            write_output=print,
            current_timestamp=_console_timestamp,
        )


def create_global_env(host: Host) -> Environment:
    env = Environment()
    env.declare("true", BooleanVal(True), True)
    env.declare("false", BooleanVal(False), True)
    env.declare("null", NullVal(), True)

    def print_fn(args: List[RuntimeVal], _env: Environment) -> RuntimeVal:
        host.write_output("".join(render(arg) for arg in args))
        return NullVal()

    def time_fn(_args: List[RuntimeVal], _env: Environment) -> RuntimeVal:
        return NumberVal(float(host.current_timestamp()))

    env.declare("print", NativeFnVal("print", print_fn), True)
    env.declare("time", NativeFnVal("time", time_fn), True)
    return env
