'''
tabla de palabras clave (lenguaje, secciones, registros, condiciones, instrucciones)
'''

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Dict, Iterator, Mapping

class KeywordType(Enum):
    NONE = 0
    LANGUAGE = 1
    SECTION = 2
    REGISTER = 3
    CONDITION = 4
    INSTRUCTION = 5

class LanguageType(IntEnum):
    SECTION = 0
    FUNCTION = 1
    LET = 2
    CONST = 3

class SectionType(IntEnum):
    METADATA = 0
    RST_0 = 1
    RST_1 = 2
    RST_2 = 3
    RST_3 = 4
    RST_4 = 5
    RST_5 = 6
    RST_6 = 7
    RST_7 = 8
    RST_8 = 9
    RST_9 = 10
    RST_A = 11
    RST_B = 12
    RST_C = 13
    RST_D = 14
    RST_E = 15
    RST_F = 16
    INT_0 = 17
    INT_1 = 18
    INT_2 = 19
    INT_3 = 20
    INT_4 = 21
    INT_5 = 22
    INT_6 = 23
    INT_7 = 24
    INT_8 = 25
    INT_9 = 26
    INT_A = 27
    INT_B = 28
    INT_C = 29
    INT_D = 30
    INT_E = 31
    INT_F = 32
    PROGRAM = 33
    RAM = 34
    QRAM = 35

class RegisterType(IntEnum):
    # Cada familia: registro completo (32 bits), palabra, byte alto y byte bajo
    A = 0
    AW = 1
    AH = 2
    AL = 3
    B = 4
    BW = 5
    BH = 6
    BL = 7
    C = 8
    CW = 9
    CH = 10
    CL = 11
    D = 12
    DW = 13
    DH = 14
    DL = 15

class ConditionType(IntEnum):
    N = 0    # sin condición
    CS = 1   # acarreo activo
    CC = 2   # acarreo inactivo
    ZS = 3   # cero activo
    ZC = 4   # cero inactivo
    OS = 5   # desbordamiento activo
    US = 6   # subdesbordamiento activo

class InstructionType(IntEnum):
    NOP = 0
    STOP = 1
    HALT = 2
    SEC = 3
    CEC = 4
    DI = 5
    EI = 6
    DAL = 7
    DAW = 8
    DAB = 9
    CPL = 10
    CPW = 11
    CPB = 12
    SCF = 13
    CCF = 14
    LD = 15
    LDQ = 16
    LDH = 17
    ST = 18
    STQ = 19
    STH = 20
    MV = 21
    PUSH = 22
    POP = 23
    JMP = 24
    JPB = 25
    CALL = 26
    RST = 27
    RET = 28
    RETI = 29
    JPS = 30
    INC = 31
    DEC = 32
    ADD = 33
    ADC = 34
    SUB = 35
    SBC = 36
    AND = 37
    OR = 38
    XOR = 39
    CMP = 40
    SLA = 41
    SRA = 42
    SRL = 43
    RL = 44
    RLC = 45
    RR = 46
    RRC = 47
    BIT = 48
    SET = 49
    RES = 50
    SWAP = 51

@dataclass(frozen=True)
class Keyword:
    """Entrada de la tabla de palabras clave.

    - type: categoría (NONE si el texto no es palabra clave)
    - param_one: identificador semántico (opcode, sección, registro, condición o construcción)
    - param_two: aridad de operandos (0, 1 o 2) en el caso de las instrucciones
    """
    type: KeywordType = KeywordType.NONE
    param_one: int = 0
    param_two: int = 0

    @property
    def arity(self) -> int:
        return self.param_two if self.type is KeywordType.INSTRUCTION else 0

NONE_KEYWORD = Keyword()


class KeywordTable(Mapping[str, Keyword]):
    """Tabla inmutable mnemónico (en mayúsculas) -> Keyword.

    Se construye una vez (ver KEYWORDS) y se pasa por referencia al lexer y al parser.
    La búsqueda es total: un texto desconocido devuelve NONE_KEYWORD, nunca un error.
    """

    def __init__(self, entries: Mapping[str, Keyword]):
        self._entries: Dict[str, Keyword] = dict(entries)

    def lookup(self, text: str) -> Keyword:
        """Devuelve la entrada de 'text' (ya en mayúsculas) o NONE_KEYWORD."""
        return self._entries.get(text, NONE_KEYWORD)

    def __getitem__(self, text: str) -> Keyword:
        return self._entries[text]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    @classmethod
    def build(cls) -> "KeywordTable":
        entries: Dict[str, Keyword] = {}

        def _add(name: str, ktype: KeywordType, one: int, two: int = 0):
            entries[name] = Keyword(ktype, int(one), two)

        # Lenguaje (FUNCTION y MACRO son sinónimos)
        _add("SECTION",  KeywordType.LANGUAGE, LanguageType.SECTION)
        _add("FUNCTION", KeywordType.LANGUAGE, LanguageType.FUNCTION)
        _add("MACRO",    KeywordType.LANGUAGE, LanguageType.FUNCTION)
        _add("LET",      KeywordType.LANGUAGE, LanguageType.LET)
        _add("CONST",    KeywordType.LANGUAGE, LanguageType.CONST)

        # Secciones de memoria: RST0..RSTF, INT0..INTF se nombran con un dígito hex
        _add("METADATA", KeywordType.SECTION, SectionType.METADATA)
        for i, digit in enumerate("0123456789ABCDEF"):
            _add(f"RST{digit}", KeywordType.SECTION, SectionType.RST_0 + i)
            _add(f"INT{digit}", KeywordType.SECTION, SectionType.INT_0 + i)
        _add("PROGRAM", KeywordType.SECTION, SectionType.PROGRAM)
        _add("RAM",     KeywordType.SECTION, SectionType.RAM)
        _add("QRAM",    KeywordType.SECTION, SectionType.QRAM)

        for reg in RegisterType:
            _add(reg.name, KeywordType.REGISTER, reg)
        for cond in ConditionType:
            _add(cond.name, KeywordType.CONDITION, cond)

        for mnemonic, arity in INSTRUCTION_ARITY.items():
            _add(mnemonic, KeywordType.INSTRUCTION, InstructionType[mnemonic], arity)
        # Sinónimo habitual de MV
        _add("MOV", KeywordType.INSTRUCTION, InstructionType.MV, INSTRUCTION_ARITY["MV"])

        return cls(entries)


# Aridad de cada instrucción (número de operandos)
INSTRUCTION_ARITY: Dict[str, int] = {
    # Control
    "NOP": 0, "STOP": 0, "HALT": 0,
    "SEC": 1, "CEC": 0,
    "DI": 0, "EI": 0,
    # Ajuste decimal y complemento de un registro
    "DAL": 1, "DAW": 1, "DAB": 1,
    "CPL": 1, "CPW": 1, "CPB": 1,
    # Bandera de acarreo
    "SCF": 0, "CCF": 0,
    # Cargas, almacenes y movimientos: destino, origen
    "LD": 2, "LDQ": 2, "LDH": 2,
    "ST": 2, "STQ": 2, "STH": 2,
    "MV": 2,
    "PUSH": 1, "POP": 1,
    # Saltos: condición, destino
    "JMP": 2, "JPB": 2, "CALL": 2,
    "RST": 1,
    "RET": 1, "RETI": 0,
    "JPS": 0,
    # Aritmética y lógica
    "INC": 1, "DEC": 1,
    "ADD": 2, "ADC": 2, "SUB": 2, "SBC": 2,
    "AND": 2, "OR": 2, "XOR": 2, "CMP": 2,
    # Desplazamientos y rotaciones
    "SLA": 1, "SRA": 1, "SRL": 1,
    "RL": 1, "RLC": 1, "RR": 1, "RRC": 1,
    # Bits: bit, registro
    "BIT": 2, "SET": 2, "RES": 2,
    "SWAP": 1,
}

KEYWORDS = KeywordTable.build()

def lookup(text: str) -> Keyword:
    """Busca en la tabla por defecto; 'text' debe venir ya en mayúsculas."""
    return KEYWORDS.lookup(text)
