from __future__ import annotations
import re
from dataclasses import dataclass
from enum import Enum
from typing import List

import ply.lex as lex

from .errors import LexerError


class TokenType(Enum):
    # Literals
    NUMBER = "NUMBER"
    STRING = "STRING"
    IDENTIFIER = "IDENTIFIER"

    # Keywords
    LET = "LET"
    CONST = "CONST"
    FN = "FN"
    READ = "READ"

    # Grouping and punctuation
    OPEN_PAREN = "OPEN_PAREN"
    CLOSE_PAREN = "CLOSE_PAREN"
    OPEN_BRACE = "OPEN_BRACE"
    CLOSE_BRACE = "CLOSE_BRACE"
    OPEN_BRACKET = "OPEN_BRACKET"
    CLOSE_BRACKET = "CLOSE_BRACKET"
    COMMA = "COMMA"
    DOT = "DOT"
    COLON = "COLON"
    SEMICOLON = "SEMICOLON"
    EQUALS = "EQUALS"

    # + - * / % < >, the lexeme carries the symbol
    BINARY_OPERATOR = "BINARY_OPERATOR"

    EOF = "EOF"


@dataclass(frozen=True)
class Token:
    kind: TokenType
    lexeme: str
    line: int = 0
    column: int = 0


ESCAPES = {"n": "\n", "t": "\t", "\\": "\\", '"': '"', "'": "'"}
_escape_re = re.compile(r"\\(.)", re.S)


def unescape(body: str) -> str:
    return _escape_re.sub(lambda m: ESCAPES.get(m.group(1), m.group(1)), body)


def _column(data: str, lexpos: int) -> int:
    line_start = data.rfind("\n", 0, lexpos) + 1
    return lexpos - line_start + 1


class NomiLexer:

    tokens = tuple(t.value for t in TokenType if t is not TokenType.EOF)

    reserved = {
        "let": "LET",
        "const": "CONST",
        "fn": "FN",
        "read": "READ",
    }

    # Ignored characters
    t_ignore = " \t\r"

    t_BINARY_OPERATOR = r"[+\-*/%<>]"
    t_EQUALS = r"="

    t_OPEN_PAREN = r"\("
    t_CLOSE_PAREN = r"\)"
    t_OPEN_BRACE = r"\{"
    t_CLOSE_BRACE = r"\}"
    t_OPEN_BRACKET = r"\["
    t_CLOSE_BRACKET = r"\]"

    t_COMMA = r","
    t_DOT = r"\."
    t_COLON = r":"
    t_SEMICOLON = r";"

    def __init__(self):
        self.lexer = None

    # Comments run to the end of the line; listed first so '/' is not an operator here
    def t_COMMENT(self, t):
        r"//[^\n]*"
        pass

    def t_STRING(self, t):
        r'"(?:[^"\\]|\\[\s\S])*"|\'(?:[^\'\\]|\\[\s\S])*\''
        t.lexer.lineno += t.value.count("\n")
        t.value = unescape(t.value[1:-1])
        return t

    def t_NUMBER(self, t):
        r"\d[\d.]*"
        if t.value.count(".") > 1 or t.value.endswith("."):
            raise LexerError(
                f"Malformed number '{t.value}'",
                t.lineno,
                _column(t.lexer.lexdata, t.lexpos),
            )
        return t

    def t_IDENTIFIER(self, t):
        r"[a-zA-Z_][a-zA-Z_0-9]*"
        t.type = self.reserved.get(t.value, "IDENTIFIER")
        return t

    def t_newline(self, t):
        r"\n+"
        t.lexer.lineno += len(t.value)

    def t_error(self, t):
        char = t.value[0]
        col = _column(t.lexer.lexdata, t.lexpos)
        if char in "\"'":
            raise LexerError("Unterminated string literal", t.lineno, col)
        raise LexerError(f"Unrecognized character '{char}'", t.lineno, col)

    def build(self, **kwargs):
        """Build the lexer"""
        self.lexer = lex.lex(module=self, **kwargs)
        return self.lexer

    def tokenize(self, data: str) -> List[Token]:
        if not self.lexer:
            self.build()

        self.lexer.lineno = 1
        self.lexer.input(data)
        tokens: List[Token] = []

        while True:
            tok = self.lexer.token()
            if not tok:
                break
            tokens.append(Token(
                kind=TokenType(tok.type),
                lexeme=tok.value,
                line=tok.lineno,
                column=_column(data, tok.lexpos),
            ))

        end_line = self.lexer.lineno
        tokens.append(Token(TokenType.EOF, "EndOfFile", end_line, _column(data, len(data))))
        return tokens


def tokenize(source: str) -> List[Token]:
    return NomiLexer().tokenize(source)


def print_tokens(tokens: List[Token]):
    if not tokens:
        print("No tokens found!")
        return

    print(f"{'Line':<6}| {'Column':<7}| {'Token':<20}| Lexeme")
    print("-" * 60)

    for tok in tokens:
        value = tok.lexeme
        # Limit length for display
        if len(value) > 50:
            value = value[:47] + "..."
        # Display escape characters
        value = repr(value)[1:-1] if "\n" in value or "\t" in value else value

        print(f"{tok.line:<6}| {tok.column:<7}| {tok.kind.value:<20}| {value}")
