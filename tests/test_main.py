import io

import pytest

from nomiscript.main import main


@pytest.fixture
def program(tmp_path):
    def write(source, name="prog.nm"):
        path = tmp_path / name
        path.write_text(source, encoding="utf-8")
        return str(path)
    return write


def test_runs_program(program, capsys):
    path = program('fn add(a, b) { a + b }\nprint("sum: ", add(2, 3));')
    assert main([path]) == 0
    assert capsys.readouterr().out == "sum: 5\n"


def test_rejects_wrong_extension(program, capsys):
    path = program('print("never")', name="prog.txt")
    assert main([path]) == 1
    captured = capsys.readouterr()
    assert ".nm" in captured.err
    assert captured.out == ""


def test_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "absent.nm")]) == 1
    assert "could not be opened" in capsys.readouterr().err


def test_lexer_error_exit_status(program, capsys):
    assert main([program("let x = 1 $ 2;")]) == 1
    err = capsys.readouterr().err
    assert "LexerError" in err
    assert "let x = 1 $ 2;" in err


def test_parser_error_exit_status(program, capsys):
    assert main([program("const y;")]) == 1
    assert "ParserError" in capsys.readouterr().err


def test_runtime_error_keeps_earlier_output(program, capsys):
    assert main([program('print("before");\nconst y = 2;\ny = 3;\nprint("after");')]) == 1
    captured = capsys.readouterr()
    assert captured.out == "before\n"
    assert "EnvError" in captured.err


def test_expr_error(program, capsys):
    assert main([program("let a = [1]; a[3];")]) == 1
    assert "ExprError" in capsys.readouterr().err


def test_read_from_stdin(program, capsys, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO("Alice\n"))
    assert main([program('let name = read;\nprint("hello ", name);')]) == 0
    assert capsys.readouterr().out == "hello Alice\n"


def test_cancelled_read_exits_zero(program, capsys, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO(""))
    assert main([program('let name = read;\nprint("unreachable");')]) == 0
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "canceled" in captured.err


def test_runaway_recursion_is_reported(program, capsys):
    assert main([program("fn loop() { loop() }\nloop();")]) == 1
    assert "recursion" in capsys.readouterr().err


def test_tokens_mode(program, capsys):
    assert main(["--tokens", program("let x = 1;")]) == 0
    out = capsys.readouterr().out
    assert "LET" in out
    assert "EOF" in out


def test_ast_mode(program, capsys):
    assert main(["--ast", program("let x = 1;")]) == 0
    out = capsys.readouterr().out
    assert "VarDeclaration" in out
    assert "identifier='x'" in out


def test_modes_are_exclusive(program):
    with pytest.raises(SystemExit):
        main(["--tokens", "--ast", program("1")])


def test_invalid_utf8_source(tmp_path, capsys):
    path = tmp_path / "broken.nm"
    path.write_bytes(b"let x = \xff\xfe;")
    assert main([str(path)]) == 1
    captured = capsys.readouterr()
    assert "UTF-8" in captured.err
    assert captured.out == ""
