from dataclasses import dataclass
from typing import Any, Dict, Optional

from codelang.errors import CodeRuntimeError
from codelang.tokens import Token
from codelang.types import TypeTag, check_value, type_name


@dataclass
class Binding:
    """A variable's current value together with its fixed declared type."""
    value: Any
    tag: TypeTag


class Environment:
    """Represents a scope environment mapping identifiers to typed bindings."""
    def __init__(self, enclosing: Optional['Environment'] = None):
        self.enclosing = enclosing
        self.values: Dict[str, Binding] = {}

    def define(self, name: Token, value: Any, tag: TypeTag) -> None:
        if name.lexeme in self.values:
            raise CodeRuntimeError(name, f"Variable '{name.lexeme}' is already defined.")
        self.values[name.lexeme] = Binding(checked(name, value, tag), tag)

    def get(self, name: Token) -> Any:
        return self.lookup(name).value

    def assign(self, name: Token, value: Any) -> Any:
        binding = self.lookup(name)
        binding.value = checked(name, value, binding.tag)
        return binding.value

    def type_tag_of(self, name: str) -> Optional[TypeTag]:
        env: Optional[Environment] = self
        while env is not None:
            if name in env.values:
                return env.values[name].tag
            env = env.enclosing
        return None

    def lookup(self, name: Token) -> Binding:
        env: Optional[Environment] = self
        while env is not None:
            if name.lexeme in env.values:
                return env.values[name.lexeme]
            env = env.enclosing
        raise CodeRuntimeError(name, f"Undefined variable '{name.lexeme}'.")


def checked(name: Token, value: Any, tag: TypeTag) -> Any:
    try:
        return check_value(value, tag)
    except TypeError:
        raise CodeRuntimeError(
            name, f"Cannot store {type_name(value)} value in {tag.value} variable '{name.lexeme}'.")
