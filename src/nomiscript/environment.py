from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Optional, Set

from .errors import EnvError
from .values import RuntimeVal

@dataclass(eq=False)
class Environment:
    """One lexical scope. The global scope has no parent; every function call gets
    a child of the scope the function was declared in."""

    parent: Optional["Environment"] = None
    bindings: Dict[str, RuntimeVal] = field(default_factory=dict)
    constants: Set[str] = field(default_factory=set)

    def declare(self, name: str, value: RuntimeVal, constant: bool = False) -> RuntimeVal:
        if name in self.bindings:
            raise EnvError(f"Cannot declare variable {name}. As it already is defined.")
        self.bindings[name] = value
        if constant:
            self.constants.add(name)
        return value

    def assign(self, name: str, value: RuntimeVal) -> RuntimeVal:
        env = self.resolve(name)
        if name in env.constants:
            raise EnvError(f"Cannot reassign to variable {name} as it was declared constant.")
        env.bindings[name] = value
        return value

    def lookup(self, name: str) -> RuntimeVal:
        return self.resolve(name).bindings[name]

    def find(self, name: str) -> Optional["Environment"]:
        cur = self
        while cur:
            if name in cur.bindings:
                return cur
            cur = cur.parent
        return None

    def resolve(self, name: str) -> "Environment":
        env = self.find(name)
        if env is not None:
            return env
        raise EnvError(f"Cannot resolve '{name}' as it does not exist.")

    def has(self, name: str) -> bool:
        return name in self.bindings

    def is_constant(self, name: str) -> bool:
        return name in self.resolve(name).constants
