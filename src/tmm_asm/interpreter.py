'''
intérprete mínimo: entorno de símbolos, valores en tiempo de ejecución y evaluación del árbol
'''

from __future__ import annotations
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

from .ast import NumericLiteral, Program, Statement
from .diagnostics import AsmError, Diagnostic, error

# ---- Valores en tiempo de ejecución ----

@dataclass(frozen=True)
class VoidValue:
    """Resultado de una sentencia sin valor."""

@dataclass(frozen=True)
class NumberValue:
    """Número con su parte entera y su parte fraccionaria escalada a 32 bits."""
    value: float

    @property
    def integer(self) -> int:
        return int(math.modf(self.value)[1]) & 0xFFFFFFFF

    @property
    def fractional(self) -> int:
        frac = abs(math.modf(self.value)[0])
        return int(frac * 0xFFFFFFFF)

RuntimeValue = Union[VoidValue, NumberValue]

# ---- Entorno ----

@dataclass
class Environment:
    """Ámbito de símbolos enlazado con su ámbito padre (None en el global)."""
    parent: Optional['Environment'] = None
    symbols: Dict[str, RuntimeValue] = field(default_factory=dict)

    def declare(self, name: str, value: RuntimeValue) -> RuntimeValue:
        if name in self.symbols:
            raise AsmError(error(f"Símbolo '{name}' ya declarado en este ámbito", kind="ejecucion"))
        self.symbols[name] = value
        return value

    def resolve(self, name: str) -> Optional['Environment']:
        """Ámbito más cercano que declara 'name', o None."""
        env: Optional[Environment] = self
        while env is not None:
            if name in env.symbols:
                return env
            env = env.parent
        return None

    def lookup(self, name: str) -> RuntimeValue:
        env = self.resolve(name)
        if env is None:
            raise AsmError(error(f"Símbolo '{name}' no declarado", kind="ejecucion"))
        return env.symbols[name]

    def child(self) -> 'Environment':
        return Environment(parent=self)

# ---- Intérprete ----

class Interpreter:
    """Evalúa un Program terminado. Solo admite programas y literales numéricos;
    cualquier otro nodo se informa como no implementado y la ejecución falla."""

    def __init__(self, environment: Optional[Environment] = None):
        self.environment = environment if environment is not None else Environment()
        self.diagnostics: List[Diagnostic] = []

    def run(self, program: Program) -> bool:
        try:
            self.evaluate(program)
        except AsmError as ex:
            self.diagnostics.append(ex.diagnostic)
            return False
        return True

    def evaluate(self, node: Union[Program, Statement]) -> RuntimeValue:
        if isinstance(node, Program):
            result: RuntimeValue = VoidValue()
            for stmt in node.body:
                result = self.evaluate(stmt)
            return result
        if isinstance(node, NumericLiteral):
            return NumberValue(node.value)
        raise AsmError(error(f"Nodo de sintaxis sin implementar: {type(node).__name__}", kind="ejecucion"))
