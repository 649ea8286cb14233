from __future__ import annotations
import math
from typing import List, Optional

from .ast_nodes import *
from .environment import Environment
from .errors import ExprError, ReadCancelled
from .natives import Host, create_global_env
from .parser import parse
from .values import (
    ArrayVal,
    BooleanVal,
    FunctionVal,
    NativeFnVal,
    NullVal,
    NumberVal,
    ObjectVal,
    RuntimeVal,
    StringVal,
)


def _divide(lhs: float, rhs: float) -> float:
    # IEEE-754: x/0 is a signed infinity, 0/0 is NaN
    if rhs == 0:
        if lhs == 0 or math.isnan(lhs):
            return math.nan
        return math.copysign(math.inf, lhs) * math.copysign(1.0, rhs)
    return lhs / rhs


def _modulo(lhs: float, rhs: float) -> float:
    if rhs == 0 or math.isinf(lhs):
        return math.nan
    return math.fmod(lhs, rhs)


class Interpreter:
    def __init__(self, host: Optional[Host] = None):
        self.host = host if host is not None else Host.console()

    def global_env(self) -> Environment:
        return create_global_env(self.host)

    def evaluate(self, node: Stmt, env: Environment) -> RuntimeVal:
        if isinstance(node, NumericLiteral):
            return NumberVal(node.value)
        if isinstance(node, StringLiteral):
            return StringVal(node.value)
        if isinstance(node, Identifier):
            return env.lookup(node.symbol)
        if isinstance(node, ObjectLiteral):
            return self._eval_object(node, env)
        if isinstance(node, ArrayDeclaration):
            return ArrayVal([self.evaluate(e, env) for e in node.elements])
        if isinstance(node, CallExpr):
            return self._eval_call(node, env)
        if isinstance(node, AssignmentExpr):
            return self._eval_assignment(node, env)
        if isinstance(node, BinaryExpr):
            return self._eval_binary(node, env)
        if isinstance(node, MemberExpr):
            return self._eval_member(node, env)
        if isinstance(node, Read):
            return self._eval_read(node, env)
        if isinstance(node, Program):
            return self._eval_body(node.body, env)
        if isinstance(node, VarDeclaration):
            value = self.evaluate(node.value, env) if node.value is not None else NullVal()
            return env.declare(node.identifier, value, node.constant)
        if isinstance(node, FunctionDeclaration):
            fn = FunctionVal(node.name, node.parameters, node.body, env)
            return env.declare(node.name, fn, False)

        raise TypeError(f"AST node {type(node).__name__} has not been set up for interpretation.")

    def _eval_body(self, body: List[Stmt], env: Environment) -> RuntimeVal:
        result: RuntimeVal = NullVal()
        for stmt in body:
            result = self.evaluate(stmt, env)
        return result

    # ---------- Expressions ----------
    def _eval_object(self, obj: ObjectLiteral, env: Environment) -> ObjectVal:
        result = ObjectVal()
        for prop in obj.properties:
            if prop.value is None:
                # shorthand { key } reads the variable of the same name
                result.properties[prop.key] = env.lookup(prop.key)
            else:
                result.properties[prop.key] = self.evaluate(prop.value, env)
        return result

    def _eval_assignment(self, node: AssignmentExpr, env: Environment) -> RuntimeVal:
        if not isinstance(node.assigne, Identifier):
            raise ExprError(
                f"Invalid LHS inside assignment expr: {type(node.assigne).__name__}",
                node.line,
                node.column,
            )
        return env.assign(node.assigne.symbol, self.evaluate(node.value, env))

    def _eval_binary(self, binop: BinaryExpr, env: Environment) -> RuntimeVal:
        lhs = self.evaluate(binop.left, env)
        rhs = self.evaluate(binop.right, env)

        if isinstance(lhs, NumberVal) and isinstance(rhs, NumberVal):
            return self._eval_numeric_binary(lhs.value, rhs.value, binop)

        if isinstance(lhs, StringVal) and isinstance(rhs, StringVal):
            if binop.operator == "+":
                return StringVal(lhs.value + rhs.value)
            raise ExprError(f"Unsupported string operator: {binop.operator}", binop.line, binop.column)

        # mixed or non-scalar operands
        return NullVal()

    def _eval_numeric_binary(self, lhs: float, rhs: float, binop: BinaryExpr) -> RuntimeVal:
        op = binop.operator
        if op == "+":
            return NumberVal(lhs + rhs)
        if op == "-":
            return NumberVal(lhs - rhs)
        if op == "*":
            return NumberVal(lhs * rhs)
        if op == "/":
            return NumberVal(_divide(lhs, rhs))
        if op == "%":
            return NumberVal(_modulo(lhs, rhs))
        if op == "<":
            return BooleanVal(lhs < rhs)
        if op == ">":
            return BooleanVal(lhs > rhs)
        raise ExprError(f"Unsupported numeric operator: {op}", binop.line, binop.column)

    def _eval_member(self, node: MemberExpr, env: Environment) -> RuntimeVal:
        target = self.evaluate(node.object, env)

        if not node.computed:
            return self._get_property(target, node.property.symbol, node)

        key = self.evaluate(node.property, env)
        if isinstance(target, ArrayVal) and isinstance(key, NumberVal):
            if not math.isfinite(key.value):
                raise ExprError("Invalid array index", node.line, node.column)
            index = math.floor(key.value)
            if 0 <= index < len(target.elements):
                return target.elements[index]
            raise ExprError("Array index out of bounds", node.line, node.column)

        if isinstance(target, ObjectVal) and isinstance(key, StringVal):
            return self._get_property(target, key.value, node)

        raise ExprError("Invalid array or index", node.line, node.column)

    def _get_property(self, target: RuntimeVal, key: str, node: MemberExpr) -> RuntimeVal:
        if not isinstance(target, ObjectVal):
            raise ExprError(f"Cannot read property '{key}' of {target.type}", node.line, node.column)
        if key not in target.properties:
            raise ExprError(f"Object has no property '{key}'", node.line, node.column)
        return target.properties[key]

    def _eval_call(self, expr: CallExpr, env: Environment) -> RuntimeVal:
        fn = self.evaluate(expr.caller, env)
        args = [self.evaluate(arg, env) for arg in expr.args]

        if isinstance(fn, NativeFnVal):
            return fn.call(args, env)

        if isinstance(fn, FunctionVal):
            scope = Environment(parent=fn.declaration_env)
            # no arity check: missing arguments are null, extra ones are dropped
            for i, name in enumerate(fn.parameters):
                scope.declare(name, args[i] if i < len(args) else NullVal(), False)
            return self._eval_body(fn.body, scope)

        raise ExprError(f"Cannot call value that is not a function: {fn.type}", expr.line, expr.column)

    def _eval_read(self, node: Read, env: Environment) -> RuntimeVal:
        line = self.host.read_line()
        if line is None:
            raise ReadCancelled("Read operation canceled by the user.")
        value = StringVal(line)
        if node.standalone:
            # stores only into an existing, writable binding
            owner = env.find(node.variable)
            if owner is not None and node.variable not in owner.constants:
                owner.bindings[node.variable] = value
        return value


def run(source: str, host: Optional[Host] = None, env: Optional[Environment] = None) -> RuntimeVal:
    """Tokenizes, parses and evaluates `source`, in a fresh global scope unless `env` is given."""
    interpreter = Interpreter(host)
    if env is None:
        env = interpreter.global_env()
    return interpreter.evaluate(parse(source), env)
