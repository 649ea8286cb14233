"""NomiScript: a small tree-walking interpreter for .nm programs."""

from .environment import Environment
from .errors import EnvError, ExprError, LexerError, NomiError, ParserError, ReadCancelled
from .interpreter import Interpreter, run
from .lexer import Token, TokenType, tokenize
from .natives import Host, create_global_env
from .parser import Parser, parse

__version__ = "0.1.0"
