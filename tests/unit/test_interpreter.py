import pytest
from src.tmm_asm.interpreter import Interpreter, Environment, NumberValue, VoidValue
from src.tmm_asm.diagnostics import AsmError
from src.tmm_asm.parser import parse

def test_empty_program_succeeds():
    program, _ = parse("\n; nada\n")
    interp = Interpreter()
    assert interp.run(program)
    assert not interp.diagnostics

def test_numeric_literals_evaluate():
    program, _ = parse("1\n2.5\n")
    assert Interpreter().evaluate(program) == NumberValue(2.5)

def test_unimplemented_node_fails():
    program, _ = parse("NOP\n")
    interp = Interpreter()
    assert not interp.run(program)
    d = interp.diagnostics[0]
    assert d.kind == "ejecucion"
    assert "InstructionStatement" in d.message

def test_number_value_split():
    v = NumberValue(3.5)
    assert v.integer == 3
    assert v.fractional == 0xFFFFFFFF // 2
    assert NumberValue(-1.0).integer == 0xFFFFFFFF

def test_environment_scopes():
    root = Environment()
    root.declare("x", NumberValue(1.0))
    inner = root.child()
    inner.declare("y", VoidValue())
    assert inner.lookup("x") == NumberValue(1.0)
    assert inner.resolve("x") is root
    assert root.resolve("y") is None
    with pytest.raises(AsmError):
        root.declare("x", NumberValue(2.0))
    with pytest.raises(AsmError):
        root.lookup("y")
