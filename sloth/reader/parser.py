"""
  Lisp Reader, Lexer and Parser

- Streaming, lazy parsing over a regex tokenizer
- Emits Sloth terms:

    - lists -> Pair chains ending in Nil
    - dotted lists -> Pair chains ending in the tail
    - () -> Nil
    - symbols -> Symbol (`true`, `false` and `nil` included)
    - strings -> str
    - numbers -> int/float
    - characters (#\\a, #\\space, #\\newline, #\\tab) -> Char
    - quote forms -> (quote expr), (quasiquote expr), (unquote expr), (unquote-splicing expr)

A `Reader` reads one form at a time from an iterator of lines, pulling more
lines only while the current form is incomplete. It is also the value of an
input port in Lisp code (`read`, `open-input-string`).
"""

from __future__ import annotations

import re
from typing import Iterable, Iterator, NamedTuple, Optional

from sloth import SExpression
from sloth.types.char import Char
from sloth.types.errors import EndOfInput, IncompleteInput, ReadError
from sloth.types.pair import make_list, lisp_list
from sloth.types.symbol import Symbol


TOKEN_RE = re.compile(
    r"\s*(?:"
    r"(?P<comment>;[^\n]*)"  # single-line comment
    r"|(?P<ml_start>#\|)"  # multi-line comment start
    r"|(?P<quote>[\'`])"  # ' and `
    r"|(?P<unquote>,@|,)"  # , and ,@
    r"|(?P<lparen>\()"  # (
    r"|(?P<rparen>\))"  # )
    r'|(?P<string>"(?:\\.|[^\\"])*")'  # double-quoted strings
    r'|(?P<open_string>"(?:\\.|[^\\"])*\Z)'  # string still open at end of input
    r"|(?P<char>#\\(?:newline|space|tab|return|.))"  # character literals, named or single-char
    r'|(?P<symbol>[^\s()\'`",;]+)'  # fallback: symbols and numbers
    r")",
    re.DOTALL,
)

INT_RE = re.compile(r"[+-]?\d+\Z")

NAMED_CHARS: dict[str, str] = {
    "space": " ",
    "newline": "\n",
    "tab": "\t",
    "return": "\r",
}

STRING_ESCAPES: dict[str, str] = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "0": "\0",
    "\\": "\\",
    '"': '"',
}

QUOTE_FORMS: dict[str, Symbol] = {
    "'": Symbol("quote"),
    "`": Symbol("quasiquote"),
    ",": Symbol("unquote"),
    ",@": Symbol("unquote-splicing"),
}

DOT = "."


class Token(NamedTuple):
    type: str
    value: str
    start: int
    end: int


def lex(source: str) -> Iterator[Token]:
    """Token generator: yields Tokens with their offsets into `source`."""
    pos = 0
    n = len(source)

    while pos < n:
        m = TOKEN_RE.match(source, pos)
        if not m:
            if source[pos:].isspace():
                return
            raise ReadError(f"unexpected character {source[pos]!r}", pos)

        kind = m.lastgroup
        start = m.start(kind)
        pos = m.end()

        if kind == "comment":
            continue
        if kind == "ml_start":
            depth = 1
            while depth > 0:
                if pos >= n:
                    raise IncompleteInput("unterminated multi-line comment", start)
                if source.startswith("#|", pos):
                    depth += 1
                    pos += 2
                elif source.startswith("|#", pos):
                    depth -= 1
                    pos += 2
                else:
                    pos += 1
            continue
        if kind == "open_string":
            raise IncompleteInput("unterminated string", start)

        yield Token(kind, m.group(kind), start, pos)


def unescape(literal: str, offset: int) -> str:
    out = []
    body = literal[1:-1]
    i = 0
    while i < len(body):
        c = body[i]
        if c == "\\":
            i += 1
            esc = body[i]
            if esc not in STRING_ESCAPES:
                raise ReadError(f"unknown string escape \\{esc}", offset + i)
            out.append(STRING_ESCAPES[esc])
        else:
            out.append(c)
        i += 1
    return "".join(out)


def parse_atom(text: str) -> SExpression:
    """Numbers become int/float; anything else is a Symbol."""
    if INT_RE.match(text):
        return int(text)
    if text[0].isdigit() or (len(text) > 1 and text[0] in "+-." and (text[1].isdigit() or text[1] == ".")):
        try:
            return float(text)
        except ValueError:
            pass
    return Symbol(text)


class TokenStream:
    def __init__(self, token_iter: Iterable[Token]):
        self.tokens = iter(token_iter)
        self.buffer: list[Token] = []
        # End offset of the last consumed token
        self.pos = 0

    def peek(self) -> Optional[Token]:
        if not self.buffer:
            try:
                self.buffer.append(next(self.tokens))
            except StopIteration:
                return None
        return self.buffer[0]

    def advance(self) -> Optional[Token]:
        tok = self.buffer.pop(0) if self.buffer else next(self.tokens, None)
        if tok is not None:
            self.pos = tok.end
        return tok

    def parse_expr(self) -> SExpression:
        """Parse the next form. Raises EndOfInput when no tokens remain."""
        tok = self.peek()
        if tok is None:
            raise EndOfInput(offset=self.pos)
        return self._parse()

    def _parse(self) -> SExpression:
        tok = self.advance()
        if tok is None:
            raise IncompleteInput("unexpected end of input", self.pos)

        if tok.type == "symbol":
            if tok.value == DOT:
                raise ReadError("unexpected '.'", tok.start)
            return parse_atom(tok.value)

        # Quote forms
        if tok.type in ("quote", "unquote"):
            return lisp_list(QUOTE_FORMS[tok.value], self._parse())

        # List or dotted list
        if tok.type == "lparen":
            items = []
            while True:
                nxt = self.peek()
                if nxt is None:
                    raise IncompleteInput("unmatched '('", tok.start)
                if nxt.type == "rparen":
                    self.advance()
                    return make_list(items)
                if nxt.type == "symbol" and nxt.value == DOT:
                    self.advance()
                    if not items:
                        raise ReadError("dotted list needs an element before '.'", nxt.start)
                    tail = self._parse()
                    close = self.advance()
                    if close is None:
                        raise IncompleteInput("unmatched '('", tok.start)
                    if close.type != "rparen":
                        raise ReadError("expected ')' after dotted tail", close.start)
                    return make_list(items, tail)
                items.append(self._parse())

        if tok.type == "rparen":
            raise ReadError("unexpected ')'", tok.start)

        if tok.type == "char":
            val = tok.value[2:]  # strip off "#\"
            if len(val) == 1:
                return Char(val)
            return Char(NAMED_CHARS[val])

        if tok.type == "string":
            return unescape(tok.value, tok.start)

        raise ReadError(f"unknown token: {tok.type} {tok.value}", tok.start)

    def parse_all(self) -> Iterator[SExpression]:
        while self.peek() is not None:
            yield self._parse()


def read_all(source: str) -> list[SExpression]:
    """Parse every form in `source`."""
    return list(TokenStream(lex(source)).parse_all())


class Reader:
    """Reads forms one at a time from an iterator of text lines."""

    def __init__(self, lines: Iterable[str], name: str = "<input>"):
        self.lines = iter(lines)
        self.name = name
        self.text = ""
        self.exhausted = False

    @classmethod
    def from_string(cls, text: str, name: str = "<string>") -> Reader:
        return cls(text.splitlines(keepends=True), name)

    def _pull(self) -> bool:
        """Append the next line to the buffer; False once the lines run out."""
        if self.exhausted:
            return False
        line = next(self.lines, None)
        if line is None:
            self.exhausted = True
            return False
        self.text += line
        return True

    def read(self) -> SExpression:
        """Return the next form, reading more lines while it is incomplete.

        Raises EndOfInput once only whitespace and comments remain.
        """
        while True:
            stream = TokenStream(lex(self.text))
            try:
                if stream.peek() is None:
                    raise EndOfInput(offset=len(self.text))
                expr = stream.parse_expr()
            except (EndOfInput, IncompleteInput):
                if self._pull():
                    continue
                self.text = ""
                raise
            except ReadError:
                # Drop the offending input so the next read starts fresh.
                self.text = ""
                raise
            self.text = self.text[stream.pos:]
            return expr

    def __iter__(self) -> Iterator[SExpression]:
        while True:
            try:
                yield self.read()
            except EndOfInput:
                return

    def __repr__(self) -> str:
        return f"#<input-port {self.name}>"

