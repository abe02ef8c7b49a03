# src/tmm_asm/parser.py
from __future__ import annotations
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Tuple

from .ast import (
    Program, SectionStatement, LabelStatement, InstructionStatement, FunctionStatement,
    FunctionCall, BinaryExpression, UnaryExpression, AddressExpression,
    Identifier, StringLiteral, NumericLiteral, RegisterLiteral, ConditionLiteral, PlaceholderLiteral,
    Expression, Statement, make_expression, make_statement,
)
from .diagnostics import AsmError, Diagnostic, error
from .keywords import (
    KEYWORDS, KeywordTable, KeywordType, LanguageType,
    ConditionType, InstructionType, RegisterType, SectionType,
)
from .lexer import Lexer
from .tokens import Token, TokenType

# Base de cada literal numérico entero
RADIX = {
    TokenType.BINARY: 2,
    TokenType.OCTAL: 8,
    TokenType.HEXADECIMAL: 16,
}

class Parser:
    """Parser descendente recursivo sobre el flujo de tokens de un Lexer.

    Orden de precedencia de expresiones (de menor a mayor):
      - Llamada a función
      - Lógica         && ||
      - Comparación    == === != !== > < >= <=
      - Bit a bit      & | ^ ~ << >>
      - Aditiva        + - ..
      - Multiplicativa * / %
      - Unaria         ! ~ + -
      - Primaria

    Sin recuperación de errores: el primer fallo aborta el programa completo.
    """

    def __init__(self, lexer: Lexer, keywords: KeywordTable = KEYWORDS):
        self.lexer = lexer
        self.keywords = keywords
        self.diagnostics: List[Diagnostic] = []
        self._depth = 0  # anidamiento de cuerpos de función

    # ---------- Programa ----------

    def parse_program(self) -> Optional[Program]:
        """Devuelve el Program o None; el diagnóstico apunta al inicio de la sentencia fallida."""
        program = Program()
        lx = self.lexer
        while lx.has_more_tokens():
            if lx.discard_new_line():
                continue
            lead = lx.token_at()
            try:
                program.push(self.parse_statement())
            except AsmError as ex:
                self.diagnostics.append(ex.diagnostic.at(line=lead.line, file=lead.file or None))
                return None
        return program

    # ---------- Sentencias ----------

    def parse_statement(self) -> Statement:
        tok = self.lexer.token_at()
        if tok.type is TokenType.KEYWORD:
            kw = tok.get_keyword(self.keywords)
            if kw.type is KeywordType.LANGUAGE:
                if kw.param_one == LanguageType.SECTION:
                    return self.parse_section()
                if kw.param_one == LanguageType.FUNCTION:
                    return self.parse_function()
                raise self._fail(f"La palabra clave '{tok.value}' aún no está implementada", tok)
            if kw.type is KeywordType.INSTRUCTION:
                return self.parse_instruction()
        if tok.type is TokenType.PERIOD:
            return self.parse_label()
        return self.parse_expression()

    def parse_section(self) -> SectionStatement:
        lx = self.lexer
        lx.discard_token()
        sec = lx.discard_token()
        kw = sec.get_keyword(self.keywords)
        if sec.type is not TokenType.KEYWORD or kw.type is not KeywordType.SECTION:
            raise self._fail("Se esperaba el nombre de una sección tras 'SECTION'", sec,
                             hint="p.ej., PROGRAM, RAM, QRAM, RST0 o INT0")
        section = SectionType(kw.param_one)
        if self._at_line_end():
            return make_statement(SectionStatement, sec, section)
        if not lx.discard_token_if(TokenType.COMMA):
            raise self._fail("Se esperaba ',' entre la sección y su desplazamiento", lx.token_at())
        offset = self.parse_expression()
        self._expect_line_end("Se esperaba fin de línea tras la sección")
        return make_statement(SectionStatement, sec, section, offset)

    def parse_label(self) -> LabelStatement:
        lx = self.lexer
        lx.discard_token()
        name = self.parse_primary()
        if not isinstance(name, Identifier):
            raise self._fail("Se esperaba un nombre de etiqueta tras '.'", lx.token_at())
        if not lx.discard_token_if(TokenType.COLON):
            raise self._fail("Se esperaba ':' tras la etiqueta", lx.token_at())
        return make_statement(LabelStatement, name)

    def parse_instruction(self) -> InstructionStatement:
        lx = self.lexer
        tok = lx.discard_token()
        kw = tok.get_keyword(self.keywords)
        opcode = InstructionType(kw.param_one)

        if kw.param_two == 0:
            lx.discard_new_line()
            return make_statement(InstructionStatement, opcode)

        operands = [self.parse_expression()]
        if kw.param_two == 2:
            if not lx.discard_token_if(TokenType.COMMA):
                raise self._fail("Se esperaba ',' entre argumentos", lx.token_at(),
                                 hint=f"'{tok.value}' requiere 2 operandos")
            operands.append(self.parse_expression())
        self._expect_line_end("Se esperaba fin de línea tras la instrucción")
        return make_statement(InstructionStatement, opcode, tuple(operands))

    def parse_function(self) -> FunctionStatement:
        lx = self.lexer
        head = lx.discard_token()
        if self._depth > 0:
            raise self._fail(f"No se admite '{head.value}' dentro de otra función", head)

        name = self.parse_primary()
        if not isinstance(name, Identifier):
            raise self._fail("Se esperaba el nombre de la función", head)
        lx.discard_new_line()
        if not lx.discard_token_if(TokenType.OPEN_BRACE):
            raise self._fail("Se esperaba '{' al inicio del cuerpo de la función", lx.token_at())

        body: List[Statement] = []
        self._depth += 1
        try:
            while True:
                while lx.discard_token_if(TokenType.NEW_LINE):
                    pass
                if lx.discard_token_if(TokenType.CLOSE_BRACE):
                    break
                if lx.token_at().type is TokenType.END_OF_FILE:
                    raise self._fail("Fin de archivo inesperado: falta '}' al final de la función", lx.token_at())
                body.append(self.parse_statement())
        finally:
            self._depth -= 1
        return make_statement(FunctionStatement, name, tuple(body))

    # ---------- Expresiones ----------

    def parse_expression(self) -> Expression:
        return self.parse_function_call()

    def parse_function_call(self) -> Expression:
        lx = self.lexer
        callee = self.parse_logical()
        if not lx.discard_token_if(TokenType.OPEN_PAREN):
            return callee

        args: List[Expression] = []
        if not lx.discard_token_if(TokenType.CLOSE_PAREN):
            while True:
                args.append(self.parse_expression())
                if lx.discard_token_if(TokenType.COMMA):
                    continue
                if lx.discard_token_if(TokenType.CLOSE_PAREN):
                    break
                raise self._fail("Se esperaba ',' o ')' en la lista de argumentos", lx.token_at())
        return make_expression(FunctionCall, callee, tuple(args))

    def _parse_binary(self, next_level: Callable[[], Expression], matches: Callable[[Token], bool]) -> Expression:
        """Nivel binario asociativo por la izquierda: next_level (op next_level)*."""
        lx = self.lexer
        left = next_level()
        while matches(lx.token_at()):
            op = lx.discard_token()
            right = next_level()
            left = make_expression(BinaryExpression, left, right, op)
        return left

    def parse_logical(self) -> Expression:
        return self._parse_binary(self.parse_comparison, Token.is_logical_operator)

    def parse_comparison(self) -> Expression:
        return self._parse_binary(self.parse_bitwise, Token.is_comparison_operator)

    def parse_bitwise(self) -> Expression:
        return self._parse_binary(self.parse_additive, Token.is_bitwise_operator)

    def parse_additive(self) -> Expression:
        return self._parse_binary(self.parse_multiplicative, Token.is_additive_operator)

    def parse_multiplicative(self) -> Expression:
        return self._parse_binary(self.parse_unary, Token.is_multiplicative_operator)

    def parse_unary(self) -> Expression:
        lx = self.lexer
        if lx.token_at().is_unary_operator():
            op = lx.discard_token()
            return make_expression(UnaryExpression, self.parse_primary(), op)
        return self.parse_primary()

    def parse_primary(self) -> Expression:
        lx = self.lexer
        tok = lx.discard_token()
        tt = tok.type

        if tt is TokenType.KEYWORD:
            kw = tok.get_keyword(self.keywords)
            if kw.type is KeywordType.REGISTER:
                return make_expression(RegisterLiteral, RegisterType(kw.param_one))
            if kw.type is KeywordType.CONDITION:
                return make_expression(ConditionLiteral, ConditionType(kw.param_one))
        elif tt is TokenType.IDENTIFIER:
            return make_expression(Identifier, tok.value)
        elif tt is TokenType.CHAR:
            return make_expression(NumericLiteral, float(ord(tok.value)))
        elif tt is TokenType.STRING:
            return make_expression(StringLiteral, tok.value)
        elif tt is TokenType.NUMBER:
            return make_expression(NumericLiteral, float(tok.value))
        elif tt in RADIX:
            return make_expression(NumericLiteral, float(int(tok.value, RADIX[tt])))
        elif tt is TokenType.PLACEHOLDER:
            return make_expression(PlaceholderLiteral, int(tok.value, 10))
        elif tt is TokenType.OPEN_BRACKET:
            inner = self.parse_expression()
            if not lx.discard_token_if(TokenType.CLOSE_BRACKET):
                raise self._fail("Falta ']' al final de la expresión de dirección", lx.token_at())
            return make_expression(AddressExpression, inner)
        elif tt is TokenType.OPEN_PAREN:
            inner = self.parse_expression()
            if not lx.discard_token_if(TokenType.CLOSE_PAREN):
                raise self._fail("Falta ')' al final de la expresión entre paréntesis", lx.token_at())
            return inner
        elif tt is TokenType.END_OF_FILE:
            raise self._fail("Fin de archivo inesperado durante el análisis", tok)

        raise self._fail(f"Token inesperado '{tok}'", tok)

    # ---------- Helpers ----------

    def _at_line_end(self) -> bool:
        lx = self.lexer
        if lx.discard_new_line():
            return True
        # '}' cierra la última sentencia de un cuerpo de función escrito en la misma línea
        return self._depth > 0 and lx.token_at().type is TokenType.CLOSE_BRACE

    def _expect_line_end(self, message: str) -> None:
        if not self._at_line_end():
            raise self._fail(message, self.lexer.token_at())

    @staticmethod
    def _fail(message: str, tok: Token, hint: Optional[str] = None) -> AsmError:
        return AsmError(error(message, line=tok.line, file=tok.file or None, hint=hint, kind="gramatica"))


def parse_files(paths: Iterable[str | Path], *, keywords: KeywordTable = KEYWORDS) -> Tuple[Optional[Program], List[Diagnostic]]:
    """Tokeniza todos los archivos en una sesión y parsea el resultado.
    Devuelve (program, diagnostics); program es None si hubo algún error."""
    lexer = Lexer(keywords)
    for p in paths:
        if not lexer.tokenize_file(p):
            return None, list(lexer.diagnostics)
    return _parse_lexer(lexer, keywords)

def parse(text: str, *, filename: Optional[str] = None, keywords: KeywordTable = KEYWORDS) -> Tuple[Optional[Program], List[Diagnostic]]:
    """
    Devuelve (program, diagnostics) para un texto fuente en memoria.

    Reglas:
      - Comentarios: ';' hasta fin de línea.
      - Secciones: 'SECTION nombre' o 'SECTION nombre, desplazamiento'.
      - Etiquetas: '.nombre:'.
      - Funciones: 'FUNCTION nombre { ... }' (MACRO es sinónimo).
      - Instrucciones: mnemónico + operandos separados por comas.
    """
    lexer = Lexer(keywords)
    if not lexer.tokenize_text(text, filename=filename or "<mem>"):
        return None, list(lexer.diagnostics)
    return _parse_lexer(lexer, keywords)

def _parse_lexer(lexer: Lexer, keywords: KeywordTable) -> Tuple[Optional[Program], List[Diagnostic]]:
    parser = Parser(lexer, keywords)
    program = parser.parse_program()
    return program, list(parser.diagnostics)
