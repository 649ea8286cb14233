from __future__ import annotations
from typing import Optional

from termcolor import colored


class NomiError(Exception):
    """Base of every fatal NomiScript error. The class name is the error kind."""

    def __init__(self, message: str, line: Optional[int] = None, col: Optional[int] = None):
        self.message = message
        self.line = line
        self.col = col
        super().__init__(self.describe())

    @property
    def kind(self) -> str:
        return type(self).__name__

    def describe(self) -> str:
        if self.line is None:
            return f"{self.kind}: {self.message}"
        return f"{self.kind} at {self.line}:{self.col} - {self.message}"


class LexerError(NomiError):
    pass


class ParserError(NomiError):
    pass


class EnvError(NomiError):
    pass


class ExprError(NomiError):
    pass


class ReadCancelled(Exception):
    """Raised when the input capability reports end of input during a `read`."""


def diagnose(error: NomiError, source: str) -> str:
    """Returns the offending source line with the error column underlined."""
    lines = source.splitlines()
    if error.line is None or not 0 < error.line <= len(lines):
        return ""
    text = lines[error.line - 1]
    col = max((error.col or 1) - 1, 0)
    caret = colored("^", "red", attrs=["bold"])
    return f"  {text}\n  {' ' * col}{caret}"


def format_error(error: NomiError) -> str:
    head = colored(f"{error.kind}: ", "red", attrs=["bold"])
    if error.line is None:
        return head + error.message
    return head + colored(f"{error.line}:{error.col}: ", attrs=["bold"]) + error.message
