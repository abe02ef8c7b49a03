'''
mapa de memoria de la CPU (rangos de direcciones de 32 bits por región)
'''

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Optional

from .keywords import SectionType

# Máscara para direcciones de 32 bits
U32_MASK = 0xFFFFFFFF

@dataclass(frozen=True)
class MemoryRange:
    """Región del espacio de direcciones: [start, end] inclusivo.

    section es la palabra clave SECTION asociada; las regiones de pila, pila de
    llamadas y E/S no tienen sección porque el código no se ensambla en ellas.
    """
    name: str
    start: int
    end: int
    section: Optional[SectionType] = None

    @property
    def size(self) -> int:
        return self.end - self.start + 1

    def contains(self, address: int) -> bool:
        return self.start <= address <= self.end

    def __str__(self) -> str:
        return f"{self.name:<10} 0x{self.start:08X}-0x{self.end:08X}"

# Cada vector RST/INT ocupa 0x100 bytes
VECTOR_SIZE = 0x100

METADATA_BASE   = 0x00000000
RST_BASE        = 0x00001000
INT_BASE        = 0x00002000
PROGRAM_BASE    = 0x00003000
RAM_BASE        = 0x80000000
STACK_BASE      = 0xFFFD0000
CALL_STACK_BASE = 0xFFFE0000
QRAM_BASE       = 0xFFFF0000
IO_BASE         = 0xFFFFFF00

def _build_map() -> List[MemoryRange]:
    out = [MemoryRange("METADATA", METADATA_BASE, RST_BASE - 1, SectionType.METADATA)]
    for i in range(16):
        start = RST_BASE + i * VECTOR_SIZE
        out.append(MemoryRange(f"RST{i:X}", start, start + VECTOR_SIZE - 1, SectionType(SectionType.RST_0 + i)))
    for i in range(16):
        start = INT_BASE + i * VECTOR_SIZE
        out.append(MemoryRange(f"INT{i:X}", start, start + VECTOR_SIZE - 1, SectionType(SectionType.INT_0 + i)))
    out += [
        MemoryRange("PROGRAM",    PROGRAM_BASE,    RAM_BASE - 1,        SectionType.PROGRAM),
        MemoryRange("RAM",        RAM_BASE,        STACK_BASE - 1,      SectionType.RAM),
        MemoryRange("STACK",      STACK_BASE,      CALL_STACK_BASE - 1),
        MemoryRange("CALL_STACK", CALL_STACK_BASE, QRAM_BASE - 1),
        MemoryRange("QRAM",       QRAM_BASE,       IO_BASE - 1,         SectionType.QRAM),
        MemoryRange("IO",         IO_BASE,         U32_MASK),
    ]
    return out

# Regiones en orden de dirección, contiguas y sin solapes
MEMORY_MAP: List[MemoryRange] = _build_map()

_BY_SECTION: Dict[SectionType, MemoryRange] = {
    r.section: r for r in MEMORY_MAP if r.section is not None
}

def range_for_section(section: int) -> MemoryRange:
    """Devuelve la región asociada a una sección o lanza KeyError."""
    try:
        return _BY_SECTION[SectionType(section)]
    except ValueError:
        raise KeyError(f"Sección desconocida: {section}") from None

def find_range(address: int) -> Optional[MemoryRange]:
    """Región que contiene 'address', o None si no es una dirección de 32 bits."""
    if not 0 <= address <= U32_MASK:
        return None
    for r in MEMORY_MAP:
        if r.contains(address):
            return r
    return None
