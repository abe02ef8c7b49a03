# src/tmm_asm/lexer.py
from __future__ import annotations
import io
import string
from pathlib import Path
from typing import List, Optional, Set, TextIO

from .diagnostics import AsmError, Diagnostic, error
from .keywords import KEYWORDS, KeywordType, KeywordTable
from .tokens import Token, TokenType

IDENT_START = frozenset(string.ascii_letters + "_")
IDENT_CHARS = frozenset(string.ascii_letters + string.digits + "_")
DIGITS      = frozenset(string.digits)
HEX_DIGITS  = frozenset(string.hexdigits)
OCT_DIGITS  = frozenset("01234567")
BIN_DIGITS  = frozenset("01")

# Operadores y puntuación; se prueba primero el más largo (3, 2 y luego 1 carácter)
SYMBOLS = {
    "===": TokenType.COMPARE_STRICT_EQUALS,
    "!==": TokenType.COMPARE_STRICT_NOT_EQUALS,
    "**=": TokenType.ASSIGN_EXPONENT,
    "<<=": TokenType.ASSIGN_BITWISE_LEFT_SHIFT,
    ">>=": TokenType.ASSIGN_BITWISE_RIGHT_SHIFT,

    "==": TokenType.COMPARE_EQUALS,
    "!=": TokenType.COMPARE_NOT_EQUALS,
    ">=": TokenType.COMPARE_GREATER_EQUALS,
    "<=": TokenType.COMPARE_LESS_EQUALS,
    "++": TokenType.INCREMENT,
    "--": TokenType.DECREMENT,
    "**": TokenType.EXPONENT,
    "+=": TokenType.ASSIGN_PLUS,
    "-=": TokenType.ASSIGN_MINUS,
    "*=": TokenType.ASSIGN_TIMES,
    "/=": TokenType.ASSIGN_DIVIDE,
    "%=": TokenType.ASSIGN_MODULO,
    "&=": TokenType.ASSIGN_BITWISE_AND,
    "|=": TokenType.ASSIGN_BITWISE_OR,
    "^=": TokenType.ASSIGN_BITWISE_XOR,
    "&&": TokenType.LOGICAL_AND,
    "||": TokenType.LOGICAL_OR,
    "<<": TokenType.BITWISE_LEFT_SHIFT,
    ">>": TokenType.BITWISE_RIGHT_SHIFT,
    "..": TokenType.CONCAT,

    "=": TokenType.ASSIGN_EQUALS,
    "!": TokenType.LOGICAL_NOT,
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.TIMES,
    "/": TokenType.DIVIDE,
    "%": TokenType.MODULO,
    "&": TokenType.BITWISE_AND,
    "|": TokenType.BITWISE_OR,
    "^": TokenType.BITWISE_XOR,
    "~": TokenType.BITWISE_NOT,
    ">": TokenType.COMPARE_GREATER,
    "<": TokenType.COMPARE_LESS,
    "(": TokenType.OPEN_PAREN,
    ")": TokenType.CLOSE_PAREN,
    "[": TokenType.OPEN_BRACKET,
    "]": TokenType.CLOSE_BRACKET,
    "{": TokenType.OPEN_BRACE,
    "}": TokenType.CLOSE_BRACE,
    ",": TokenType.COMMA,
    ":": TokenType.COLON,
    ".": TokenType.PERIOD,
}

# Escapes admitidos en literales de carácter y de cadena
ESCAPES = {
    "n": "\n", "t": "\t", "r": "\r", "0": "\0",
    "\\": "\\", '"': '"', "'": "'",
}

class _Source:
    """Cursor de caracteres sobre el texto de un archivo ('' indica fin de archivo)."""

    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    def get(self) -> str:
        if self.pos >= len(self.text):
            self.pos += 1
            return ""
        ch = self.text[self.pos]
        self.pos += 1
        return ch

    def unget(self, n: int = 1) -> None:
        self.pos -= n

    def peek(self, n: int = 1) -> str:
        return self.text[self.pos:self.pos + n]


class Lexer:
    """Convierte uno o varios archivos fuente en un único flujo de tokens.

    El flujo se consume por delante con un cursor (token_at / discard_*); el último
    END_OF_FILE nunca se descarta, así que las consultas tras agotar el flujo son estables.
    Los archivos ya tokenizados en la sesión se ignoran (protección ante inclusiones repetidas).
    """

    def __init__(self, keywords: KeywordTable = KEYWORDS):
        self.keywords = keywords
        self.tokens: List[Token] = []
        self.diagnostics: List[Diagnostic] = []
        self._pos = 0
        self._lexed_paths: Set[str] = set()
        self._file = ""
        self._line = 0

    # ---------- Acceso al flujo de tokens ----------

    def has_more_tokens(self) -> bool:
        return self._pos < len(self.tokens) and self.tokens[self._pos].type is not TokenType.END_OF_FILE

    def token_at(self, index: int = 0) -> Token:
        """Token en la posición 'index' desde el frente; fuera de rango es un error de programación."""
        i = self._pos + index
        if index < 0 or i >= len(self.tokens):
            raise IndexError(f"Índice de token {index} fuera de rango")
        return self.tokens[i]

    def discard_token(self) -> Token:
        tok = self.token_at()
        self._advance()
        return tok

    def discard_new_line(self) -> bool:
        """Descarta un NEW_LINE (o acepta END_OF_FILE) como fin de sentencia."""
        if self.token_at().type in (TokenType.NEW_LINE, TokenType.END_OF_FILE):
            self._advance()
            return True
        return False

    def discard_token_if(self, ttype: TokenType) -> bool:
        if self.token_at().type is ttype:
            self._advance()
            return True
        return False

    def _advance(self) -> None:
        if self._pos < len(self.tokens) - 1 and self.tokens[self._pos].type is not TokenType.END_OF_FILE:
            self._pos += 1

    def format_tokens(self) -> List[str]:
        """Listado numerado de todos los tokens de la sesión."""
        return [f"{i}. {tok}" for i, tok in enumerate(self.tokens)]

    # ---------- Tokenización ----------

    def tokenize_file(self, path: str | Path) -> bool:
        """Tokeniza un archivo; devuelve False y registra un diagnóstico si falla."""
        if not str(path):
            self.diagnostics.append(error("No se indicó archivo de entrada", kind="archivo"))
            return False

        full = Path(path).resolve()
        key = str(full)
        if key in self._lexed_paths:
            return True
        if not full.exists():
            self.diagnostics.append(error(f"Archivo '{key}' no encontrado", file=key, kind="archivo"))
            return False
        self._lexed_paths.add(key)

        try:
            with open(full, "r", encoding="utf-8") as f:
                return self.tokenize_stream(f, filename=key)
        except (OSError, UnicodeDecodeError) as ex:
            self.diagnostics.append(error(f"No se pudo leer '{key}': {ex}", file=key, kind="archivo"))
            return False

    def tokenize_text(self, text: str, *, filename: str = "<mem>") -> bool:
        return self.tokenize_stream(io.StringIO(text), filename=filename)

    def tokenize_stream(self, stream: TextIO, *, filename: Optional[str] = None) -> bool:
        """Recorre el flujo carácter a carácter hasta END_OF_FILE o el primer error léxico."""
        if filename is not None:
            self._file = filename
        self._line = 1

        # Al añadir otro archivo, el END_OF_FILE anterior pasa a ser un fin de línea
        if self.tokens and self.tokens[-1].type is TokenType.END_OF_FILE:
            last = self.tokens[-1]
            self.tokens[-1] = Token(TokenType.NEW_LINE, "", last.file, last.line)

        src = _Source(stream.read())
        try:
            self._scan(src)
        except AsmError as ex:
            self.diagnostics.append(ex.diagnostic)
            return False
        return True

    def _scan(self, src: _Source) -> None:
        in_comment = False
        while True:
            ch = src.get()
            if ch == "":
                self._insert(TokenType.END_OF_FILE)
                return
            if ch == "\n":
                in_comment = False
                self._insert(TokenType.NEW_LINE)
                self._line += 1
                continue
            if in_comment:
                continue
            if ch == ";":
                in_comment = True
                continue
            if ch.isspace():
                continue

            if ch in IDENT_START:
                self._scan_identifier(src, ch)
            elif ch == "'":
                self._scan_char(src)
            elif ch == '"':
                self._scan_string(src)
            elif ch == "@" or ch in DIGITS:
                self._scan_number(src, ch)
            else:
                self._scan_symbol(src, ch)

    def _insert(self, ttype: TokenType, value: str = "", line: Optional[int] = None) -> None:
        self.tokens.append(Token(ttype, value, self._file, self._line if line is None else line))

    def _fail(self, message: str, hint: Optional[str] = None) -> AsmError:
        return AsmError(error(message, line=self._line, file=self._file, hint=hint, kind="lexico"))

    def _scan_identifier(self, src: _Source, ch: str) -> None:
        chars = [ch]
        nxt = src.get()
        while nxt and nxt in IDENT_CHARS:
            chars.append(nxt)
            nxt = src.get()
        src.unget()

        value = "".join(chars)
        upper = value.upper()
        if self.keywords.lookup(upper).type is not KeywordType.NONE:
            self._insert(TokenType.KEYWORD, upper)
        else:
            self._insert(TokenType.IDENTIFIER, value)

    def _read_escape(self, src: _Source) -> str:
        nxt = src.get()
        if nxt == "":
            raise self._fail("Fin de archivo inesperado tras '\\'")
        # Un escape desconocido se conserva tal cual
        return ESCAPES.get(nxt, "\\" + nxt)

    def _scan_char(self, src: _Source) -> None:
        ch = src.get()
        if ch in ("", "\n"):
            raise self._fail("Literal de carácter sin cerrar")
        if ch == "'":
            raise self._fail("Literal de carácter vacío")
        if ch == "\\":
            ch = self._read_escape(src)
        if src.get() != "'" or len(ch) != 1:
            raise self._fail("Se encontró más de un carácter en el literal de carácter",
                             hint="use comillas dobles para cadenas")
        self._insert(TokenType.CHAR, ch)

    def _scan_string(self, src: _Source) -> None:
        start = self._line
        chars: List[str] = []
        ch = src.get()
        while ch != '"':
            if ch == "":
                raise self._fail("Fin de archivo inesperado dentro de una cadena")
            if ch == "\\":
                chars.append(self._read_escape(src))
            else:
                if ch == "\n":
                    self._line += 1
                chars.append(ch)
            ch = src.get()
        self._insert(TokenType.STRING, "".join(chars), line=start)

    def _scan_number(self, src: _Source, ch: str) -> None:
        if ch == "0":
            prefix = src.get()
            if prefix in ("x", "X"):
                return self._scan_radix(src, HEX_DIGITS, TokenType.HEXADECIMAL, "0x")
            if prefix in ("b", "B"):
                return self._scan_radix(src, BIN_DIGITS, TokenType.BINARY, "0b")
            if prefix in ("o", "O"):
                return self._scan_radix(src, OCT_DIGITS, TokenType.OCTAL, "0o")
            src.unget()

        if ch == "@":
            digits = self._take(src, DIGITS)
            if not digits:
                raise self._fail("Se esperaba el índice del marcador tras '@'")
            self._insert(TokenType.PLACEHOLDER, digits)
            return

        value = ch + self._take(src, DIGITS)
        # Como mucho un punto decimal ('2.' es válido); '..' es concatenación ('1..2')
        ahead = src.peek(2)
        if ahead[:1] == "." and ahead[1:2] != ".":
            src.get()
            value += "." + self._take(src, DIGITS)
        self._insert(TokenType.NUMBER, value)

    def _scan_radix(self, src: _Source, allowed: frozenset, ttype: TokenType, prefix: str) -> None:
        digits = self._take(src, allowed)
        if not digits:
            raise self._fail(f"Se esperaban dígitos tras el prefijo '{prefix}'")
        self._insert(ttype, digits)

    @staticmethod
    def _take(src: _Source, allowed: frozenset) -> str:
        out = []
        ch = src.get()
        while ch and ch in allowed:
            out.append(ch)
            ch = src.get()
        src.unget()
        return "".join(out)

    def _scan_symbol(self, src: _Source, ch: str) -> None:
        candidate = ch + src.peek(2)
        for n in (3, 2, 1):
            ttype = SYMBOLS.get(candidate[:n]) if len(candidate) >= n else None
            if ttype is not None:
                src.pos += n - 1
                self._insert(ttype)
                return
        raise self._fail(f"Carácter inesperado '{ch}'")
