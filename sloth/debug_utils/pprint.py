"""Printer: render Sloth values as text.

`to_repr` renders a value the way the reader would read it back (strings are
quoted, characters use `#\\` syntax); `to_display` renders strings and
characters raw, for `print`/`println`. Unforced lazy slots are shown as
`#<delayed>` rather than being forced by printing.
"""

from __future__ import annotations

from sloth import LispValue
from sloth.types.char import Char
from sloth.types.errors import LispError
from sloth.types.nil import Nil
from sloth.types.pair import LazyPair, Pair, Thunk
from sloth.types.procedure import Procedure
from sloth.types.symbol import Symbol

DELAYED = "#<delayed>"
_PENDING = object()

CHAR_NAMES = {" ": "space", "\n": "newline", "\t": "tab", "\r": "return"}

STRING_ESCAPES = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\t": "\\t", "\r": "\\r"}

QUOTE_PREFIXES = {
    Symbol("quote"): "'",
    Symbol("quasiquote"): "`",
    Symbol("unquote"): ",",
    Symbol("unquote-splicing"): ",@",
}


def _slot(pair: Pair, slot: str):
    """Read a pair slot without forcing it."""
    if isinstance(pair, LazyPair):
        raw = pair.peek(slot)
        return _PENDING if isinstance(raw, Thunk) else raw
    return pair.car if slot == "car" else pair.cdr


def _render_pair(pair: Pair, readable: bool) -> str:
    head = _slot(pair, "car")
    rest = _slot(pair, "cdr")
    # 'x `x ,x ,@x
    if isinstance(head, Symbol) and head in QUOTE_PREFIXES and isinstance(rest, Pair) and not isinstance(rest, LazyPair):
        if rest.cdr is Nil:
            return QUOTE_PREFIXES[head] + _render(rest.car, readable)

    parts = []
    cur: LispValue = pair
    while isinstance(cur, Pair):
        item = _slot(cur, "car")
        parts.append(DELAYED if item is _PENDING else _render(item, readable))
        cur = _slot(cur, "cdr")
    if cur is Nil:
        return "(" + " ".join(parts) + ")"
    tail = DELAYED if cur is _PENDING else _render(cur, readable)
    return "(" + " ".join(parts) + " . " + tail + ")"


def _render(value: LispValue, readable: bool) -> str:
    match value:
        case Pair():
            return _render_pair(value, readable)
        case _ if value is Nil:
            return "()"
        case Symbol():
            return value.id
        case str():
            if not readable:
                return value
            return '"' + "".join(STRING_ESCAPES.get(c, c) for c in value) + '"'
        case Char():
            if not readable:
                return value.ch
            return "#\\" + CHAR_NAMES.get(value.ch, value.ch)
        case LispError():
            return f"#<error {value.kind}: {_render(value.value, True)}>"
        case Procedure():
            return repr(value)
        case None:
            return "#<void>"
    return str(value)


def to_repr(value: LispValue) -> str:
    """Readable rendering of `value`."""
    return _render(value, True)


def to_display(value: LispValue) -> str:
    """Human rendering of `value`: strings and characters are written raw."""
    return _render(value, False)
