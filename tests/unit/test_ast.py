import dataclasses
import pytest
from src.tmm_asm.ast import (
    Program, InstructionStatement, LabelStatement, FunctionStatement, BinaryExpression,
    Identifier, NumericLiteral, RegisterLiteral, SyntaxType,
    make_statement, make_expression, is_expression, dump,
)
from src.tmm_asm.keywords import InstructionType, RegisterType
from src.tmm_asm.parser import parse

def test_type_tags():
    assert Identifier("x").type is SyntaxType.IDENTIFIER
    assert Program().type is SyntaxType.PROGRAM
    assert InstructionStatement(InstructionType.NOP).type is SyntaxType.INSTRUCTION_STATEMENT

def test_nodes_are_immutable():
    n = NumericLiteral(1.0)
    with pytest.raises(dataclasses.FrozenInstanceError):
        n.value = 2.0

def test_factories_enforce_capability():
    assert make_expression(Identifier, "x") == Identifier("x")
    assert make_statement(Identifier, "x") == Identifier("x")
    assert make_statement(LabelStatement, Identifier("l")).symbol.symbol == "l"
    with pytest.raises(TypeError):
        make_expression(LabelStatement, Identifier("l"))
    with pytest.raises(TypeError):
        make_statement(Program)
    assert is_expression(RegisterLiteral(RegisterType.A))
    assert not is_expression(FunctionStatement(Identifier("f")))

def test_program_push_only_statements():
    p = Program()
    p.push(Identifier("x"))
    assert p.body == [Identifier("x")]
    with pytest.raises(TypeError):
        p.push("NOP")

def test_dump():
    program, _ = parse("FUNCTION f {\nMV A, 1 + 2\n}\n")
    text = dump(program)
    assert text.splitlines() == [
        "Program",
        "  FunctionStatement",
        "    Identifier f",
        "    InstructionStatement MV",
        "      RegisterLiteral A",
        "      BinaryExpression Suma",
        "        NumericLiteral 1",
        "        NumericLiteral 2",
    ]
