import json

import pytest

from sloth.interpreter import Interpreter
from sloth_lsp.indexer import BUILTIN_SIGNATURES, build_index
from sloth_lsp.repl_server import ReplServer
from sloth_lsp.server import completion_items, diagnostics_for, extract_word_at, hover_text

SOURCE = """\
(define (square x) "Square of x." (* x x))
(define-macro (my-when c . body) "Run body when c." `(if ,c (begin ,@body) ()))
(define pi 3.14)
(define inc (lambda (n) "Add one." (+ n 1)))
(define pick (case-lambda "Pick one." ((a) a) ((a b) b)))
(define (plain) "just a value")
"""


@pytest.fixture
def index():
    return build_index(SOURCE)


def test_indexes_definitions(index):
    assert set(index.symbols) == {"square", "my-when", "pi", "inc", "pick", "plain"}
    assert index.symbols["square"].kind == "function"
    assert index.symbols["my-when"].kind == "macro"
    assert index.symbols["pi"].kind == "var"
    assert index.symbols["inc"].kind == "function"
    assert index.symbols["pick"].kind == "function"


def test_definition_positions(index):
    square = index.symbols["square"]
    assert (square.line, square.col) == (0, 9)
    pi = index.symbols["pi"]
    assert (pi.line, pi.col) == (2, 8)


def test_docstrings(index):
    assert index.symbols["square"].doc == "Square of x."
    assert index.symbols["my-when"].doc == "Run body when c."
    assert index.symbols["inc"].doc == "Add one."
    assert index.symbols["pick"].doc == "Pick one."
    assert index.symbols["pi"].doc is None
    # A lone string is the body of the function
    assert index.symbols["plain"].doc is None


def test_clean_source_has_no_problems(index):
    assert index.problems == []
    assert diagnostics_for(index) == []


def test_read_problem_position():
    idx = build_index("(define a 1)\n  )\n")
    assert len(idx.problems) == 1
    problem = idx.problems[0]
    assert (problem.line, problem.col) == (1, 2)
    assert "unexpected ')'" in problem.message
    (diag,) = diagnostics_for(idx)
    assert diag.message.startswith("read-error:")
    assert diag.range.start.line == 1


def test_incomplete_buffer_still_indexes():
    idx = build_index("(define (f x) x)\n(define (g y")
    assert "f" in idx.symbols
    assert "g" in idx.symbols
    assert idx.problems


def test_builtin_signatures_come_from_docstrings():
    assert "Head of a pair" in BUILTIN_SIGNATURES["car"]
    assert "catch-error" not in BUILTIN_SIGNATURES  # special forms are not builtins


def test_hover(index):
    assert "Square of x." in hover_text("square", index)
    assert "function" in hover_text("square", index)
    assert "builtin" in hover_text("car", index)
    assert hover_text("unknown-thing", index) is None


def test_completion_includes_locals_and_builtins(index):
    labels = {item.label for item in completion_items(index)}
    assert {"square", "pi", "car", "throw-error"} <= labels


@pytest.mark.parametrize(
    "text, line, col, expected",
    [
        ("(define (square x)", 0, 10, "square"),
        ("(car xs)", 0, 1, "car"),
        ("(a\n  (string->symbol s))", 1, 5, "string->symbol"),
        ("( )", 0, 1, None),
        ("x", 3, 0, None),
    ],
)
def test_extract_word_at(text, line, col, expected):
    assert extract_word_at(text, line, col) == expected


# -----------------------------------------------------
# REPL server
# -----------------------------------------------------

@pytest.fixture
def server():
    return ReplServer(interp=Interpreter())


def test_eval_request(server):
    resp = server.handle_request({"cmd": "eval", "code": "(define x 2) (* x 21)"})
    assert resp == {"ok": True, "result": "42"}


def test_state_persists_between_requests(server):
    server.handle_request({"cmd": "eval", "code": "(define greeting \"hi\")"})
    assert server.handle_request({"cmd": "eval", "code": "greeting"})["result"] == '"hi"'


def test_error_response(server):
    resp = server.handle_request({"cmd": "eval", "code": "(car 5)"})
    assert resp["ok"] is False
    assert resp["error"] == "type-error"
    assert resp["message"] == "car: expecting a pair, got 5"
    assert "\tfrom (car 5)" in resp["traceback"]


def test_read_error_response(server):
    resp = server.handle_request({"cmd": "eval", "code": "(car"})
    assert resp["error"] == "read-error"


def test_bad_requests(server):
    assert server.handle_request({"cmd": "nope"})["error"] == "bad-request"
    assert server.handle_line(b"not json")["error"] == "bad-request"
    assert server.handle_line(b"[1, 2]")["error"] == "bad-request"


def test_handle_line(server):
    line = json.dumps({"cmd": "eval", "code": "(list 1 2)"}).encode("utf-8")
    assert server.handle_line(line) == {"ok": True, "result": "(1 2)"}
