'''
clase Diagnostic, AsmError y helpers (archivo/línea, tipos de error)
'''

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Literal

# Severidad de los diagnósticos: el front end solo emite errores
Severity = Literal["error"]

# Origen del problema: archivo, léxico, gramática o ejecución (intérprete)
Kind = Literal["archivo", "lexico", "gramatica", "ejecucion"]

_SEV_TO_LABEL = {
    "error": "ERROR",
}

@dataclass(frozen=True)
class Diagnostic:
    """Estructura de un diagnóstico para reportar problemas.

    Lleva ubicación opcional (archivo y línea), el tipo de fallo (kind) y un mensaje
    de ayuda (pista) para orientar la corrección.
    """
    severity: Severity
    message: str
    line: Optional[int] = None
    hint: Optional[str] = None
    file: Optional[str] = None
    kind: Optional[Kind] = None

    def __str__(self) -> str:
        loc = ""
        if self.file is not None:
            loc += f"{self.file}:"
        if self.line is not None:
            loc += f"{self.line}"
        if loc:
            loc += ": "
        sev = _SEV_TO_LABEL.get(self.severity, str(self.severity).upper())
        core = f"{sev}: {self.message}"
        if self.hint:
            core += f"  (pista: {self.hint})"
        return loc + core

    def at(self, *, line: int | None = None, file: str | None = None) -> "Diagnostic":
        """Copia del diagnóstico con otra ubicación (p.ej., inicio de la sentencia)."""
        return Diagnostic(self.severity, self.message, line, self.hint, file, self.kind)

def error(message: str, *, line: int | None = None,
          file: str | None = None, hint: str | None = None,
          kind: Kind | None = None) -> Diagnostic:
    """Crea un diagnóstico de tipo error."""
    return Diagnostic("error", message, line, hint, file, kind)


class AsmError(Exception):
    """Fallo del ensamblador que transporta su Diagnostic.

    Lo lanzan los pasos internos del lexer, del parser y del intérprete; los puntos
    de entrada públicos lo capturan y lo convierten en un diagnóstico de la sesión.
    """

    def __init__(self, diagnostic: Diagnostic):
        super().__init__(str(diagnostic))
        self.diagnostic = diagnostic

    @property
    def kind(self) -> Optional[Kind]:
        return self.diagnostic.kind
