'''
dataclases del árbol sintáctico (sentencias y expresiones)
'''

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import ClassVar, List, Optional, Union

from .keywords import ConditionType, InstructionType, RegisterType, SectionType
from .tokens import Token

class SyntaxType(Enum):
    # Sentencias
    PROGRAM = auto()
    SECTION_STATEMENT = auto()
    LABEL_STATEMENT = auto()
    INSTRUCTION_STATEMENT = auto()
    FUNCTION_STATEMENT = auto()

    # Expresiones
    FUNCTION_CALL = auto()
    BINARY_EXPRESSION = auto()
    UNARY_EXPRESSION = auto()
    ADDRESS_EXPRESSION = auto()

    # Expresiones primarias
    IDENTIFIER = auto()
    STRING_LITERAL = auto()
    NUMERIC_LITERAL = auto()
    REGISTER_LITERAL = auto()
    CONDITION_LITERAL = auto()
    PLACEHOLDER_LITERAL = auto()

# ---- Expresiones primarias ----

@dataclass(frozen=True)
class Identifier:
    """Símbolo (etiqueta, función o variable) referenciado por nombre."""
    type: ClassVar[SyntaxType] = SyntaxType.IDENTIFIER
    symbol: str

@dataclass(frozen=True)
class StringLiteral:
    type: ClassVar[SyntaxType] = SyntaxType.STRING_LITERAL
    value: str

@dataclass(frozen=True)
class NumericLiteral:
    """Literal numérico; enteros y fraccionarios se guardan como float."""
    type: ClassVar[SyntaxType] = SyntaxType.NUMERIC_LITERAL
    value: float

@dataclass(frozen=True)
class RegisterLiteral:
    type: ClassVar[SyntaxType] = SyntaxType.REGISTER_LITERAL
    register: RegisterType

@dataclass(frozen=True)
class ConditionLiteral:
    type: ClassVar[SyntaxType] = SyntaxType.CONDITION_LITERAL
    condition: ConditionType

@dataclass(frozen=True)
class PlaceholderLiteral:
    """Marcador @N: índice del argumento de la macro/función."""
    type: ClassVar[SyntaxType] = SyntaxType.PLACEHOLDER_LITERAL
    slot: int

# ---- Expresiones compuestas ----

@dataclass(frozen=True)
class BinaryExpression:
    type: ClassVar[SyntaxType] = SyntaxType.BINARY_EXPRESSION
    left: 'Expression'
    right: 'Expression'
    operator: Token

@dataclass(frozen=True)
class UnaryExpression:
    type: ClassVar[SyntaxType] = SyntaxType.UNARY_EXPRESSION
    operand: 'Expression'
    operator: Token

@dataclass(frozen=True)
class AddressExpression:
    """Acceso a memoria: [expr]."""
    type: ClassVar[SyntaxType] = SyntaxType.ADDRESS_EXPRESSION
    inner: 'Expression'

@dataclass(frozen=True)
class FunctionCall:
    type: ClassVar[SyntaxType] = SyntaxType.FUNCTION_CALL
    callee: 'Expression'
    arguments: tuple = ()

# ---- Sentencias ----

@dataclass(frozen=True)
class SectionStatement:
    """SECTION <sección> [, desplazamiento]."""
    type: ClassVar[SyntaxType] = SyntaxType.SECTION_STATEMENT
    section_token: Token
    section: SectionType
    offset: Optional['Expression'] = None

@dataclass(frozen=True)
class LabelStatement:
    """Etiqueta '.nombre:'."""
    type: ClassVar[SyntaxType] = SyntaxType.LABEL_STATEMENT
    symbol: Identifier

@dataclass(frozen=True)
class InstructionStatement:
    """Instrucción con opcode y 0, 1 o 2 operandos (aridad fijada por la tabla de palabras clave)."""
    type: ClassVar[SyntaxType] = SyntaxType.INSTRUCTION_STATEMENT
    opcode: InstructionType
    operands: tuple = ()

@dataclass(frozen=True)
class FunctionStatement:
    """FUNCTION/MACRO nombre { cuerpo }."""
    type: ClassVar[SyntaxType] = SyntaxType.FUNCTION_STATEMENT
    name: Identifier
    body: tuple = ()

@dataclass(frozen=True)
class Program:
    """Raíz del árbol. El cuerpo solo crece por el final (push)."""
    type: ClassVar[SyntaxType] = SyntaxType.PROGRAM
    body: List['Statement'] = field(default_factory=list)

    def push(self, statement: 'Statement') -> None:
        if not isinstance(statement, STATEMENT_TYPES):
            raise TypeError(f"Se esperaba una sentencia, obtuve {statement!r}")
        self.body.append(statement)

Expression = Union[
    FunctionCall, BinaryExpression, UnaryExpression, AddressExpression,
    Identifier, StringLiteral, NumericLiteral, RegisterLiteral, ConditionLiteral, PlaceholderLiteral,
]

Statement = Union[
    SectionStatement, LabelStatement, InstructionStatement, FunctionStatement, Expression,
]

EXPRESSION_TYPES = (
    FunctionCall, BinaryExpression, UnaryExpression, AddressExpression,
    Identifier, StringLiteral, NumericLiteral, RegisterLiteral, ConditionLiteral, PlaceholderLiteral,
)

STATEMENT_TYPES = (SectionStatement, LabelStatement, InstructionStatement, FunctionStatement) + EXPRESSION_TYPES

def is_expression(node) -> bool:
    return isinstance(node, EXPRESSION_TYPES)

def make_statement(cls, *args, **kwargs):
    """Construye un nodo solo si 'cls' es una variante de sentencia (o expresión)."""
    if cls not in STATEMENT_TYPES:
        raise TypeError(f"{cls.__name__} no es una sentencia")
    return cls(*args, **kwargs)

def make_expression(cls, *args, **kwargs):
    """Construye un nodo solo si 'cls' es una variante de expresión."""
    if cls not in EXPRESSION_TYPES:
        raise TypeError(f"{cls.__name__} no es una expresión")
    return cls(*args, **kwargs)

def statement_kinds(program: Program) -> List[SyntaxType]:
    """Tipos de las sentencias de primer nivel, en orden de aparición."""
    return [s.type for s in program.body]

# ---- Volcado legible ----

def _fmt_number(v: float) -> str:
    return str(int(v)) if v.is_integer() else repr(v)

def _label(node) -> str:
    if isinstance(node, Identifier):
        return f"Identifier {node.symbol}"
    if isinstance(node, StringLiteral):
        return f"StringLiteral {node.value!r}"
    if isinstance(node, NumericLiteral):
        return f"NumericLiteral {_fmt_number(node.value)}"
    if isinstance(node, RegisterLiteral):
        return f"RegisterLiteral {node.register.name}"
    if isinstance(node, ConditionLiteral):
        return f"ConditionLiteral {node.condition.name}"
    if isinstance(node, PlaceholderLiteral):
        return f"PlaceholderLiteral @{node.slot}"
    if isinstance(node, (BinaryExpression, UnaryExpression)):
        return f"{type(node).__name__} {node.operator.describe()}"
    if isinstance(node, SectionStatement):
        return f"SectionStatement {node.section_token.value}"
    if isinstance(node, InstructionStatement):
        return f"InstructionStatement {node.opcode.name}"
    return type(node).__name__

def _children(node) -> list:
    if isinstance(node, (Program, FunctionStatement)):
        head = [node.name] if isinstance(node, FunctionStatement) else []
        return head + list(node.body)
    if isinstance(node, BinaryExpression):
        return [node.left, node.right]
    if isinstance(node, UnaryExpression):
        return [node.operand]
    if isinstance(node, AddressExpression):
        return [node.inner]
    if isinstance(node, FunctionCall):
        return [node.callee, *node.arguments]
    if isinstance(node, SectionStatement):
        return [node.offset] if node.offset is not None else []
    if isinstance(node, LabelStatement):
        return [node.symbol]
    if isinstance(node, InstructionStatement):
        return list(node.operands)
    return []

def dump(node, indent: int = 0) -> str:
    """Representación indentada del árbol, un nodo por línea."""
    lines = ["  " * indent + _label(node)]
    for child in _children(node):
        lines.append(dump(child, indent + 1))
    return "\n".join(lines)
