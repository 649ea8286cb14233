from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional

@dataclass
class Node:
    # positions are for diagnostics only and never take part in equality
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)

# ---------- Statements ----------
class Stmt(Node): ...

@dataclass
class Program(Stmt):
    body: List[Stmt] = field(default_factory=list)

@dataclass
class VarDeclaration(Stmt):
    identifier: str = ""
    constant: bool = False
    value: Optional["Expr"] = None

@dataclass
class FunctionDeclaration(Stmt):
    name: str = ""
    parameters: List[str] = field(default_factory=list)
    body: List[Stmt] = field(default_factory=list)

# ---------- Expressions ----------
class Expr(Stmt): ...

@dataclass
class ArrayDeclaration(Expr):
    elements: List[Expr] = field(default_factory=list)

@dataclass
class Read(Expr):
    variable: str = ""
    value_type: str = "string"
    # `read name;` on its own stores the line into `name`
    standalone: bool = False

@dataclass
class AssignmentExpr(Expr):
    assigne: Expr = None
    value: Expr = None

@dataclass
class BinaryExpr(Expr):
    left: Expr = None
    right: Expr = None
    operator: str = ""

@dataclass
class CallExpr(Expr):
    caller: Expr = None
    args: List[Expr] = field(default_factory=list)

@dataclass
class MemberExpr(Expr):
    object: Expr = None
    property: Expr = None
    computed: bool = False

@dataclass
class Identifier(Expr):
    symbol: str = ""

@dataclass
class NumericLiteral(Expr):
    value: float = 0.0

@dataclass
class StringLiteral(Expr):
    value: str = ""

@dataclass
class Property(Expr):
    key: str = ""
    value: Optional[Expr] = None

@dataclass
class ObjectLiteral(Expr):
    properties: List[Property] = field(default_factory=list)
