from __future__ import annotations
import argparse, sys
from typing import List, Optional, Tuple

from .ast import Program, dump
from .diagnostics import Diagnostic
from .interpreter import Interpreter
from .layout import MEMORY_MAP
from .lexer import Lexer
from .parser import Parser

def assemble_files(paths: List[str], *, run: bool = False) -> Tuple[Optional[Program], List[Diagnostic]]:
    """Tokeniza todas las fuentes en una sesión, parsea y, si se pide, ejecuta el intérprete.
    Devuelve (program, diagnostics_totales); program es None si falló el lexer o el parser."""
    lexer = Lexer()
    for p in paths:
        if not lexer.tokenize_file(p):
            return None, list(lexer.diagnostics)
    parser = Parser(lexer)
    program = parser.parse_program()
    diags = list(lexer.diagnostics) + list(parser.diagnostics)
    if program is not None and run:
        interp = Interpreter()
        interp.run(program)
        diags += interp.diagnostics
    return program, diags

def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Ensamblador TMM: fuente -> árbol sintáctico")
    ap.add_argument("sources", nargs="*", help="archivos .tmm de entrada (se tokenizan en orden)")
    ap.add_argument("-t", "--tokens", action="store_true", help="solo tokenizar y listar los tokens")
    ap.add_argument("--ast", action="store_true", help="mostrar el árbol sintáctico")
    ap.add_argument("--run", action="store_true", help="pasar el árbol al intérprete")
    ap.add_argument("--layout", action="store_true", help="mostrar el mapa de memoria y salir")
    args = ap.parse_args(argv)

    if args.layout:
        for r in MEMORY_MAP:
            print(r)
        return 0
    if not args.sources:
        ap.error("se requiere al menos un archivo de entrada")

    if args.tokens:
        lexer = Lexer()
        for p in args.sources:
            if not lexer.tokenize_file(p):
                for d in lexer.diagnostics:
                    print(d, file=sys.stderr)
                return 2 if lexer.diagnostics[-1].kind == "archivo" else 1
        for line in lexer.format_tokens():
            print(line)
        return 0

    program, diags = assemble_files(args.sources, run=args.run)

    had_error = False
    for d in diags:
        # imprimimos todo; si hay error, devolvemos código distinto de 0
        print(d, file=sys.stderr)
        if d.severity == "error":
            had_error = True

    if had_error:
        return 2 if any(d.kind == "archivo" for d in diags) else 1

    if args.ast:
        print(dump(program))
    print(f"OK: {len(program.body)} sentencias en {len(args.sources)} archivo(s)")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
