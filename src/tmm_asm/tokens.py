'''
modelo de token (tipo, texto, archivo y línea) y clasificación de operadores
'''

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum, auto

from .keywords import KEYWORDS, Keyword, KeywordTable

class TokenType(Enum):
    UNKNOWN = auto()

    # Palabras clave
    KEYWORD = auto()

    # Literales
    IDENTIFIER = auto()
    CHAR = auto()
    STRING = auto()
    NUMBER = auto()
    BINARY = auto()
    OCTAL = auto()
    HEXADECIMAL = auto()
    PLACEHOLDER = auto()

    # Aritméticos
    PLUS = auto()
    MINUS = auto()
    TIMES = auto()
    EXPONENT = auto()
    DIVIDE = auto()
    MODULO = auto()
    INCREMENT = auto()
    DECREMENT = auto()
    CONCAT = auto()

    # Bit a bit
    BITWISE_AND = auto()
    BITWISE_OR = auto()
    BITWISE_XOR = auto()
    BITWISE_NOT = auto()
    BITWISE_LEFT_SHIFT = auto()
    BITWISE_RIGHT_SHIFT = auto()

    # Asignación
    ASSIGN_EQUALS = auto()
    ASSIGN_PLUS = auto()
    ASSIGN_MINUS = auto()
    ASSIGN_TIMES = auto()
    ASSIGN_EXPONENT = auto()
    ASSIGN_DIVIDE = auto()
    ASSIGN_MODULO = auto()
    ASSIGN_BITWISE_AND = auto()
    ASSIGN_BITWISE_OR = auto()
    ASSIGN_BITWISE_XOR = auto()
    ASSIGN_BITWISE_LEFT_SHIFT = auto()
    ASSIGN_BITWISE_RIGHT_SHIFT = auto()

    # Comparación
    COMPARE_EQUALS = auto()
    COMPARE_STRICT_EQUALS = auto()
    COMPARE_NOT_EQUALS = auto()
    COMPARE_STRICT_NOT_EQUALS = auto()
    COMPARE_GREATER = auto()
    COMPARE_LESS = auto()
    COMPARE_GREATER_EQUALS = auto()
    COMPARE_LESS_EQUALS = auto()

    # Lógicos
    LOGICAL_AND = auto()
    LOGICAL_OR = auto()
    LOGICAL_NOT = auto()

    # Agrupación y puntuación
    OPEN_PAREN = auto()
    CLOSE_PAREN = auto()
    OPEN_BRACKET = auto()
    CLOSE_BRACKET = auto()
    OPEN_BRACE = auto()
    CLOSE_BRACE = auto()
    COMMA = auto()
    COLON = auto()
    PERIOD = auto()

    # Otros
    NEW_LINE = auto()
    END_OF_FILE = auto()

_DESCRIPTIONS = {
    TokenType.KEYWORD: "Palabra clave",
    TokenType.IDENTIFIER: "Identificador",
    TokenType.CHAR: "Carácter",
    TokenType.STRING: "Cadena",
    TokenType.NUMBER: "Número",
    TokenType.BINARY: "Binario",
    TokenType.OCTAL: "Octal",
    TokenType.HEXADECIMAL: "Hexadecimal",
    TokenType.PLACEHOLDER: "Marcador",

    TokenType.PLUS: "Suma",
    TokenType.MINUS: "Resta",
    TokenType.TIMES: "Producto",
    TokenType.EXPONENT: "Potencia",
    TokenType.DIVIDE: "División",
    TokenType.MODULO: "Módulo",
    TokenType.INCREMENT: "Incremento",
    TokenType.DECREMENT: "Decremento",
    TokenType.CONCAT: "Concatenación",

    TokenType.BITWISE_AND: "Y bit a bit",
    TokenType.BITWISE_OR: "O bit a bit",
    TokenType.BITWISE_XOR: "O exclusivo bit a bit",
    TokenType.BITWISE_NOT: "Negación bit a bit",
    TokenType.BITWISE_LEFT_SHIFT: "Desplazamiento a la izquierda",
    TokenType.BITWISE_RIGHT_SHIFT: "Desplazamiento a la derecha",

    TokenType.ASSIGN_EQUALS: "Asignación",
    TokenType.ASSIGN_PLUS: "Asignación con suma",
    TokenType.ASSIGN_MINUS: "Asignación con resta",
    TokenType.ASSIGN_TIMES: "Asignación con producto",
    TokenType.ASSIGN_EXPONENT: "Asignación con potencia",
    TokenType.ASSIGN_DIVIDE: "Asignación con división",
    TokenType.ASSIGN_MODULO: "Asignación con módulo",
    TokenType.ASSIGN_BITWISE_AND: "Asignación con Y bit a bit",
    TokenType.ASSIGN_BITWISE_OR: "Asignación con O bit a bit",
    TokenType.ASSIGN_BITWISE_XOR: "Asignación con O exclusivo bit a bit",
    TokenType.ASSIGN_BITWISE_LEFT_SHIFT: "Asignación con desplazamiento a la izquierda",
    TokenType.ASSIGN_BITWISE_RIGHT_SHIFT: "Asignación con desplazamiento a la derecha",

    TokenType.COMPARE_EQUALS: "Igual",
    TokenType.COMPARE_STRICT_EQUALS: "Estrictamente igual",
    TokenType.COMPARE_NOT_EQUALS: "Distinto",
    TokenType.COMPARE_STRICT_NOT_EQUALS: "Estrictamente distinto",
    TokenType.COMPARE_GREATER: "Mayor que",
    TokenType.COMPARE_LESS: "Menor que",
    TokenType.COMPARE_GREATER_EQUALS: "Mayor o igual que",
    TokenType.COMPARE_LESS_EQUALS: "Menor o igual que",

    TokenType.LOGICAL_AND: "Y lógico",
    TokenType.LOGICAL_OR: "O lógico",
    TokenType.LOGICAL_NOT: "Negación lógica",

    TokenType.OPEN_PAREN: "Abre paréntesis",
    TokenType.CLOSE_PAREN: "Cierra paréntesis",
    TokenType.OPEN_BRACKET: "Abre corchete",
    TokenType.CLOSE_BRACKET: "Cierra corchete",
    TokenType.OPEN_BRACE: "Abre llave",
    TokenType.CLOSE_BRACE: "Cierra llave",
    TokenType.COMMA: "Coma",
    TokenType.COLON: "Dos puntos",
    TokenType.PERIOD: "Punto",

    TokenType.NEW_LINE: "Nueva línea",
    TokenType.END_OF_FILE: "Fin de archivo",
}

# ---- Clases de operadores por nivel de precedencia ----

LOGICAL_OPERATORS = frozenset({
    TokenType.LOGICAL_AND, TokenType.LOGICAL_OR,
})

COMPARISON_OPERATORS = frozenset({
    TokenType.COMPARE_EQUALS, TokenType.COMPARE_STRICT_EQUALS,
    TokenType.COMPARE_NOT_EQUALS, TokenType.COMPARE_STRICT_NOT_EQUALS,
    TokenType.COMPARE_GREATER, TokenType.COMPARE_LESS,
    TokenType.COMPARE_GREATER_EQUALS, TokenType.COMPARE_LESS_EQUALS,
})

BITWISE_OPERATORS = frozenset({
    TokenType.BITWISE_AND, TokenType.BITWISE_OR, TokenType.BITWISE_XOR,
    TokenType.BITWISE_NOT, TokenType.BITWISE_LEFT_SHIFT, TokenType.BITWISE_RIGHT_SHIFT,
})

ADDITIVE_OPERATORS = frozenset({
    TokenType.PLUS, TokenType.MINUS, TokenType.CONCAT,
})

MULTIPLICATIVE_OPERATORS = frozenset({
    TokenType.TIMES, TokenType.DIVIDE, TokenType.MODULO,
})

UNARY_OPERATORS = frozenset({
    TokenType.LOGICAL_NOT, TokenType.BITWISE_NOT, TokenType.PLUS, TokenType.MINUS,
})

ASSIGNMENT_OPERATORS = frozenset(t for t in TokenType if t.name.startswith("ASSIGN_"))

OPERATORS = (LOGICAL_OPERATORS | COMPARISON_OPERATORS | BITWISE_OPERATORS
             | ADDITIVE_OPERATORS | MULTIPLICATIVE_OPERATORS | UNARY_OPERATORS
             | ASSIGNMENT_OPERATORS
             | {TokenType.EXPONENT, TokenType.INCREMENT, TokenType.DECREMENT})

@dataclass(frozen=True)
class Token:
    """Unidad léxica. Igualdad estructural: dos tokens con los mismos campos son iguales."""
    type: TokenType = TokenType.UNKNOWN
    value: str = ""
    file: str = ""
    line: int = 0

    def describe(self) -> str:
        """Nombre legible del tipo de token (para diagnósticos y listados)."""
        return _DESCRIPTIONS.get(self.type, "Desconocido")

    def get_keyword(self, keywords: KeywordTable = KEYWORDS) -> Keyword:
        return keywords.lookup(self.value)

    def is_operator(self) -> bool:
        return self.type in OPERATORS

    def is_logical_operator(self) -> bool:
        return self.type in LOGICAL_OPERATORS

    def is_comparison_operator(self) -> bool:
        return self.type in COMPARISON_OPERATORS

    def is_bitwise_operator(self) -> bool:
        return self.type in BITWISE_OPERATORS

    def is_additive_operator(self) -> bool:
        return self.type in ADDITIVE_OPERATORS

    def is_multiplicative_operator(self) -> bool:
        return self.type in MULTIPLICATIVE_OPERATORS

    def is_unary_operator(self) -> bool:
        return self.type in UNARY_OPERATORS

    def __str__(self) -> str:
        if self.value:
            return f"{self.describe()} = '{self.value}'"
        return self.describe()
