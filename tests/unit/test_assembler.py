from src.tmm_asm.assembler import main, assemble_files

PROG = "SECTION PROGRAM\n.loop:\n    DEC A\n    JMP ZC, loop\n    HALT\n"

def test_main_ok_with_ast(tmp_path, capsys):
    f = tmp_path / "p.tmm"
    f.write_text(PROG, encoding="utf-8")
    assert main([str(f), "--ast"]) == 0
    out = capsys.readouterr().out
    assert "LabelStatement" in out
    assert "OK: 5 sentencias en 1 archivo(s)" in out

def test_main_tokens_only(tmp_path, capsys):
    f = tmp_path / "p.tmm"
    f.write_text("INC A ; x\n", encoding="utf-8")
    assert main(["-t", str(f)]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out[0] == "0. Palabra clave = 'INC'"
    assert out[-1].endswith("Fin de archivo")

def test_main_reports_grammar_error(tmp_path, capsys):
    f = tmp_path / "bad.tmm"
    f.write_text("NOP\nLD A\n", encoding="utf-8")
    assert main([str(f)]) == 1
    err = capsys.readouterr().err
    assert f"{f.resolve()}:2: ERROR:" in err

def test_main_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "no.tmm")]) == 2
    assert main(["-t", str(tmp_path / "no.tmm")]) == 2
    assert "no encontrado" in capsys.readouterr().err

def test_assemble_files_run(tmp_path):
    f = tmp_path / "n.tmm"
    f.write_text("1 + 1\n", encoding="utf-8")
    program, diags = assemble_files([str(f)], run=True)
    assert program is not None
    assert [d.kind for d in diags] == ["ejecucion"]

def test_main_layout(capsys):
    assert main(["--layout"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out[0].startswith("METADATA")
    assert "0x00003000-0x7FFFFFFF" in next(l for l in out if l.startswith("PROGRAM"))
    assert out[-1].startswith("IO")
