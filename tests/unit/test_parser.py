import pytest
from src.tmm_asm.parser import parse, parse_files, Parser
from src.tmm_asm.lexer import Lexer
from src.tmm_asm.ast import (
    Program, SectionStatement, LabelStatement, InstructionStatement, FunctionStatement,
    FunctionCall, BinaryExpression, UnaryExpression, AddressExpression,
    Identifier, StringLiteral, NumericLiteral, RegisterLiteral, ConditionLiteral, PlaceholderLiteral,
    SyntaxType, statement_kinds,
)
from src.tmm_asm.keywords import (
    KEYWORDS, Keyword, KeywordTable, KeywordType,
    InstructionType, RegisterType, ConditionType, SectionType,
)
from src.tmm_asm.tokens import TokenType

def _ok(src: str) -> Program:
    program, diags = parse(src, filename="t.tmm")
    assert not diags, [str(d) for d in diags]
    assert program is not None
    return program

def _expr(src: str):
    return _ok(src).body[0]

SRC = """
; Programa mínimo
SECTION PROGRAM
.start:
    LD A, [0x8000]
    INC A
    JMP ZC, start
    HALT

SECTION RAM, 0x100
"""

def test_parse_program_min():
    program = _ok(SRC)
    assert statement_kinds(program) == [
        SyntaxType.SECTION_STATEMENT,
        SyntaxType.LABEL_STATEMENT,
        SyntaxType.INSTRUCTION_STATEMENT,
        SyntaxType.INSTRUCTION_STATEMENT,
        SyntaxType.INSTRUCTION_STATEMENT,
        SyntaxType.INSTRUCTION_STATEMENT,
        SyntaxType.SECTION_STATEMENT,
    ]
    sec, label, ld, inc, jmp, halt, ram = program.body
    assert sec.section is SectionType.PROGRAM and sec.offset is None
    assert label == LabelStatement(Identifier("start"))
    assert ld.opcode is InstructionType.LD
    assert ld.operands == (RegisterLiteral(RegisterType.A), AddressExpression(NumericLiteral(0x8000)))
    assert inc.operands == (RegisterLiteral(RegisterType.A),)
    assert jmp.operands == (ConditionLiteral(ConditionType.ZC), Identifier("start"))
    assert halt == InstructionStatement(InstructionType.HALT)
    assert ram.section is SectionType.RAM
    assert ram.offset == NumericLiteral(256.0)

def test_statement_kinds_follow_source_order():
    src = "NOP\n.x:\nSECTION QRAM\nMV B, C\n1 + 2\nFUNCTION f {\nNOP\n}\n"
    assert statement_kinds(_ok(src)) == [
        SyntaxType.INSTRUCTION_STATEMENT,
        SyntaxType.LABEL_STATEMENT,
        SyntaxType.SECTION_STATEMENT,
        SyntaxType.INSTRUCTION_STATEMENT,
        SyntaxType.BINARY_EXPRESSION,
        SyntaxType.FUNCTION_STATEMENT,
    ]

def test_precedence_times_over_plus():
    e = _expr("1 + 2 * 3")
    assert isinstance(e, BinaryExpression)
    assert e.operator.type is TokenType.PLUS
    assert e.left == NumericLiteral(1.0)
    assert isinstance(e.right, BinaryExpression)
    assert e.right.operator.type is TokenType.TIMES
    assert (e.right.left, e.right.right) == (NumericLiteral(2.0), NumericLiteral(3.0))

def test_left_associative():
    e = _expr("10 - 4 - 3")
    assert e.operator.type is TokenType.MINUS
    assert isinstance(e.left, BinaryExpression)
    assert e.left.left == NumericLiteral(10.0)
    assert e.right == NumericLiteral(3.0)

@pytest.mark.parametrize("src, top", [
    ("a && b == c", TokenType.LOGICAL_AND),
    ("a == b | c", TokenType.COMPARE_EQUALS),
    ("a | b + c", TokenType.BITWISE_OR),
    ("a << 1 + 2", TokenType.BITWISE_LEFT_SHIFT),
    ('"x" .. "y" * 2', TokenType.CONCAT),
    ("a % b", TokenType.MODULO),
])
def test_levels(src, top):
    assert _expr(src).operator.type is top

def test_grouping_and_unary():
    e = _expr("(1 + 2) * -x")
    assert e.operator.type is TokenType.TIMES
    assert e.left.operator.type is TokenType.PLUS
    assert isinstance(e.right, UnaryExpression)
    assert e.right.operator.type is TokenType.MINUS
    assert e.right.operand == Identifier("x")

def test_unary_does_not_chain():
    program, diags = parse("- -1")
    assert program is None
    assert diags[0].kind == "gramatica"

@pytest.mark.parametrize("src, node", [
    ("0b101", NumericLiteral(5.0)),
    ("0o17", NumericLiteral(15.0)),
    ("0xFF", NumericLiteral(255.0)),
    ("2.5", NumericLiteral(2.5)),
    ("'A'", NumericLiteral(65.0)),
    ('"hola"', StringLiteral("hola")),
    ("@3", PlaceholderLiteral(3)),
    ("foo", Identifier("foo")),
    ("dh", RegisterLiteral(RegisterType.DH)),
])
def test_primaries(src, node):
    assert _expr(src) == node

def test_function_call():
    e = _expr("max(1, A, [x])")
    assert isinstance(e, FunctionCall)
    assert e.callee == Identifier("max")
    assert e.arguments == (NumericLiteral(1.0), RegisterLiteral(RegisterType.A), AddressExpression(Identifier("x")))
    empty = _expr("f()")
    assert empty == FunctionCall(Identifier("f"), ())

def test_function_statement():
    src = """
MACRO copy
{
    LD A, @0
.inner:
    ST @1, A

}
"""
    f = _expr(src)
    assert isinstance(f, FunctionStatement)
    assert f.name == Identifier("copy")
    assert [s.type for s in f.body] == [
        SyntaxType.INSTRUCTION_STATEMENT, SyntaxType.LABEL_STATEMENT, SyntaxType.INSTRUCTION_STATEMENT,
    ]
    assert f.body[0].operands[1] == PlaceholderLiteral(0)

def test_function_one_line_body():
    f = _expr("FUNCTION f { INC A }")
    assert f.body == (InstructionStatement(InstructionType.INC, (RegisterLiteral(RegisterType.A),)),)

def test_function_one_line_section():
    f = _expr("FUNCTION f { SECTION RAM }")
    (sec,) = f.body
    assert isinstance(sec, SectionStatement)
    assert sec.section is SectionType.RAM and sec.offset is None

def test_number_with_trailing_point():
    mv = _expr("MV A, 2.\n")
    assert mv.operands == (RegisterLiteral(RegisterType.A), NumericLiteral(2.0))

def test_section_resolved_with_given_table():
    # tabla propia con un alias de sección que la tabla por defecto no conoce
    table = KeywordTable({**KEYWORDS, "DATOS": Keyword(KeywordType.SECTION, int(SectionType.RAM))})
    program, diags = parse("SECTION DATOS, 0x10\n", filename="k.tmm", keywords=table)
    assert not diags
    (sec,) = program.body
    assert sec.section is SectionType.RAM
    assert sec.section_token.value == "DATOS"
    assert sec.offset == NumericLiteral(16.0)

def test_nested_function_rejected():
    program, diags = parse("FUNCTION outer {\nFUNCTION inner {\n}\n}\n", filename="n.tmm")
    assert program is None
    assert "dentro de otra función" in diags[0].message
    # el diagnóstico apunta al inicio de la sentencia de primer nivel
    assert diags[0].line == 1 and diags[0].file == "n.tmm"

def test_arity_two_with_one_operand_fails():
    program, diags = parse("NOP\nMV A\nHALT\n", filename="a.tmm")
    assert program is None
    assert len(diags) == 1
    d = diags[0]
    assert d.kind == "gramatica"
    assert "Se esperaba ',' entre argumentos" in d.message
    assert (d.file, d.line) == ("a.tmm", 2)

def test_missing_line_end():
    program, diags = parse("INC A B\n")
    assert program is None
    assert "fin de línea tras la instrucción" in diags[0].message

def test_arity_zero_same_line():
    program = _ok("NOP HALT")
    assert [s.opcode for s in program.body] == [InstructionType.NOP, InstructionType.HALT]

@pytest.mark.parametrize("src, fragment", [
    ("SECTION foo\n", "sección"),
    ("SECTION RAM 5\n", "','"),
    (".lbl\n", "':'"),
    (".1:\n", "etiqueta"),
    ("LET x = 1\n", "no está implementada"),
    ("FUNCTION f\nNOP\n", "'{'"),
    ("FUNCTION f {\nNOP\n", "falta '}'"),
    ("LD A, [1\n", "']'"),
    ("(1 + 2\n", "')'"),
    ("f(1 2)\n", "argumentos"),
    ("INC", "Fin de archivo"),
    ("INC ,\n", "Coma"),
    ("INC JMP\n", "'JMP'"),
])
def test_grammar_errors(src, fragment):
    program, diags = parse(src, filename="e.tmm")
    assert program is None
    assert diags and fragment in diags[0].message
    assert diags[0].kind == "gramatica"

def test_lexical_error_stops_before_parse():
    program, diags = parse('LD A, "abc')
    assert program is None
    assert diags[0].kind == "lexico"

def test_parser_over_empty_lexer():
    program = Parser(Lexer()).parse_program()
    assert program is not None and program.body == []

def test_parse_files(tmp_path):
    lib = tmp_path / "lib.tmm"
    lib.write_text("FUNCTION twice {\n ADD A, A\n}\n", encoding="utf-8")
    main = tmp_path / "main.tmm"
    main.write_text("SECTION PROGRAM\ntwice()\nHALT", encoding="utf-8")
    program, diags = parse_files([lib, main, lib])
    assert not diags
    assert statement_kinds(program) == [
        SyntaxType.FUNCTION_STATEMENT,
        SyntaxType.SECTION_STATEMENT,
        SyntaxType.FUNCTION_CALL,
        SyntaxType.INSTRUCTION_STATEMENT,
    ]

def test_parse_files_missing(tmp_path):
    program, diags = parse_files([tmp_path / "no.tmm"])
    assert program is None
    assert diags[0].kind == "archivo"
