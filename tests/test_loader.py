import logging

import pytest

from sloth.modules.loader import load_file, resolve_path
from sloth.types import LispError, Symbol
from sloth.types.errors import IO_ERROR, READ_ERROR, TYPE_ERROR

TRUE, FALSE = Symbol("true"), Symbol("false")


def write(path, text):
    path.write_text(text, encoding="utf-8")
    return path


def test_load_returns_last_value(interp, tmp_path):
    lib = write(tmp_path / "lib.lisp", "(define (double x) (* 2 x))\n(double 21)\n")
    assert interp.load(lib) == 42
    assert interp.eval("(double 5)") == 10


def test_load_file_builtin(interp, tmp_path):
    lib = write(tmp_path / "lib.lisp", "(define loaded 'yes)")
    assert interp.eval(f'(load-file "{lib.as_posix()}")') == Symbol("loaded")
    assert interp.eval("loaded") == Symbol("yes")


def test_load_file_defines_at_top_level(interp, tmp_path):
    lib = write(tmp_path / "lib.lisp", "(define from-file 1)")
    interp.eval(f'(let ((x 1)) (load-file "{lib.as_posix()}"))')
    assert interp.eval("(bound? 'from-file)") == TRUE


def test_failure_aborts_the_rest_of_the_file(interp, tmp_path):
    lib = write(tmp_path / "lib.lisp", "(define a 1)\n(car '())\n(define b 2)\n")
    with pytest.raises(LispError) as exc:
        interp.load(lib)
    assert exc.value.kind == TYPE_ERROR
    assert interp.eval("(bound? 'a)") == TRUE
    assert interp.eval("(bound? 'b)") == FALSE


def test_read_error_in_file(interp, tmp_path):
    lib = write(tmp_path / "lib.lisp", "(define a 1)\n)\n")
    with pytest.raises(LispError) as exc:
        interp.load(lib)
    assert exc.value.kind == READ_ERROR


def test_missing_file(interp, tmp_path):
    with pytest.raises(LispError) as exc:
        interp.load(tmp_path / "missing.lisp")
    assert exc.value.kind == IO_ERROR
    err = interp.eval('(catch-error (load-file "no/such/file.lisp"))')
    assert err.kind == IO_ERROR


def test_load_file_needs_a_string(interp):
    err = interp.eval("(catch-error (load-file 'lib))")
    assert err.kind == TYPE_ERROR


def test_search_path(interp, tmp_path, monkeypatch):
    write(tmp_path / "found-on-path.lisp", "'found")
    monkeypatch.setenv("SLOTH_PATH", str(tmp_path))
    assert resolve_path("found-on-path.lisp") == tmp_path / "found-on-path.lisp"
    assert interp.eval('(load-file "found-on-path.lisp")') == Symbol("found")


def test_search_path_ignores_absolute_paths(tmp_path, monkeypatch):
    monkeypatch.setenv("SLOTH_PATH", str(tmp_path))
    assert resolve_path(tmp_path / "absent.lisp") is None


def test_load_logs_at_debug(interp, tmp_path, caplog):
    lib = write(tmp_path / "lib.lisp", "1 2 3")
    with caplog.at_level(logging.DEBUG, logger="sloth.modules.loader"):
        load_file(lib, interp.env)
    assert any("3 form(s)" in r.getMessage() for r in caplog.records)


def test_missing_prelude_is_a_warning(tmp_path, monkeypatch, caplog):
    from sloth.interpreter import Interpreter

    monkeypatch.setenv("SLOTH_PRELUDE_PATH", str(tmp_path))
    with caplog.at_level(logging.WARNING):
        itp = Interpreter()
    assert any("prelude not found" in r.getMessage() for r in caplog.records)
    assert itp.eval("(bound? 'map)") == FALSE
    assert itp.eval("(car '(1))") == 1


def test_explicit_prelude_source():
    from sloth.interpreter import Interpreter

    itp = Interpreter(prelude="(define (twice x) (* 2 x))")
    assert itp.eval("(twice 4)") == 8
