from __future__ import annotations
import math
import re
from decimal import Decimal
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, ClassVar, Dict, List, Optional

from .ast_nodes import Stmt

if TYPE_CHECKING:
    from .environment import Environment


class RuntimeVal:
    type: ClassVar[str] = "unknown"

@dataclass
class NullVal(RuntimeVal):
    type: ClassVar[str] = "null"

@dataclass
class BooleanVal(RuntimeVal):
    type: ClassVar[str] = "boolean"
    value: bool = False

@dataclass
class NumberVal(RuntimeVal):
    type: ClassVar[str] = "number"
    value: float = 0.0

    def __post_init__(self):
        self.value = float(self.value)

@dataclass
class StringVal(RuntimeVal):
    type: ClassVar[str] = "string"
    value: str = ""

@dataclass
class ArrayVal(RuntimeVal):
    type: ClassVar[str] = "array"
    elements: List[RuntimeVal] = field(default_factory=list)

@dataclass
class ObjectVal(RuntimeVal):
    type: ClassVar[str] = "object"
    properties: Dict[str, RuntimeVal] = field(default_factory=dict)

@dataclass
class FunctionVal(RuntimeVal):
    type: ClassVar[str] = "function"
    name: str = ""
    parameters: List[str] = field(default_factory=list)
    body: List[Stmt] = field(default_factory=list)
    # shared with every other closure created in the same scope
    declaration_env: Optional["Environment"] = field(default=None, repr=False, compare=False)

NativeCall = Callable[[List[RuntimeVal], "Environment"], RuntimeVal]

@dataclass
class NativeFnVal(RuntimeVal):
    type: ClassVar[str] = "native-fn"
    name: str = ""
    call: NativeCall = field(default=None, repr=False, compare=False)


_exponent_re = re.compile(r"e([+-]?)0*(\d+)")


def format_number(value: float) -> str:
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    text = repr(value)
    if "e" in text and abs(value) < 1:
        # fixed notation down to 1e-6, exponent form below
        text = str(Decimal(text)).lower()
    return _exponent_re.sub(lambda m: "e" + (m.group(1) or "+") + m.group(2), text)


def render(val: RuntimeVal) -> str:
    """Text form used by `print`: scalars as their literal value, containers recursively."""
    if isinstance(val, NullVal):
        return "null"
    if isinstance(val, BooleanVal):
        return "true" if val.value else "false"
    if isinstance(val, NumberVal):
        return format_number(val.value)
    if isinstance(val, StringVal):
        return val.value
    if isinstance(val, ArrayVal):
        return "[" + ", ".join(render(e) for e in val.elements) + "]"
    if isinstance(val, ObjectVal):
        if not val.properties:
            return "{}"
        items = ", ".join(f"{k}: {render(v)}" for k, v in val.properties.items())
        return "{ " + items + " }"
    if isinstance(val, FunctionVal):
        return f"<fn {val.name}>"
    if isinstance(val, NativeFnVal):
        return f"<native fn {val.name}>"
    raise TypeError(f"cannot render {type(val).__name__}")
