from __future__ import annotations

"""
Lightweight indexer for Sloth Lisp files without evaluating code.

We scan for top-level forms and build an index for:
- definitions: (define name ...), (define (name ...) "doc" ...),
  (define-macro (name ...) "doc" ...)
- reader diagnostics: the first read-error reported by the real reader

The scanner is tolerant: it walks tokens from the real lexer and stops at the
first lexical error, so partial/incomplete buffers still produce an index.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from sloth.builtin.env_builtin import builtin_docs
from sloth.reader.parser import Token, lex, read_all, unescape
from sloth.types.errors import ReadError


@dataclass
class SymbolDef:
    name: str
    kind: str  # "var" | "function" | "macro"
    line: int
    col: int
    doc: Optional[str] = None


@dataclass
class ReadProblem:
    message: str
    line: int
    col: int


@dataclass
class DocumentIndex:
    symbols: Dict[str, SymbolDef] = field(default_factory=dict)
    problems: List[ReadProblem] = field(default_factory=list)


DEFINING_FORMS = ("define", "define-macro")


def _position_from_offset(text: str, offset: int) -> Tuple[int, int]:
    # Return (line, col), 0-based
    line = text.count("\n", 0, offset)
    last_nl = text.rfind("\n", 0, offset)
    col = offset if last_nl == -1 else offset - last_nl - 1
    return line, col


def _tokens(text: str) -> List[Token]:
    out = []
    try:
        for tok in lex(text):
            out.append(tok)
    except ReadError:
        pass  # reported by _read_problems
    return out


def _skip_form(tokens: List[Token], i: int) -> int:
    """Index just past the form starting at tokens[i]."""
    while i < len(tokens) and tokens[i].type in ("quote", "unquote"):
        i += 1
    if i >= len(tokens):
        return i
    if tokens[i].type != "lparen":
        return i + 1
    depth = 0
    while i < len(tokens):
        if tokens[i].type == "lparen":
            depth += 1
        elif tokens[i].type == "rparen":
            depth -= 1
            if depth == 0:
                return i + 1
        i += 1
    return i


def _docstring(tokens: List[Token], i: int) -> Optional[str]:
    """A string at tokens[i] followed by more body forms is a docstring."""
    if i + 1 < len(tokens) and tokens[i].type == "string" and tokens[i + 1].type != "rparen":
        try:
            return unescape(tokens[i].value, tokens[i].start)
        except ReadError:
            return None
    return None


def _read_problems(text: str) -> List[ReadProblem]:
    try:
        read_all(text)
    except ReadError as err:
        line, col = _position_from_offset(text, err.offset or 0)
        return [ReadProblem(str(err.value), line, col)]
    return []


def build_index(text: str) -> DocumentIndex:
    idx = DocumentIndex()
    tokens = _tokens(text)

    i = 0
    while i + 1 < len(tokens):
        tok, head = tokens[i], tokens[i + 1]
        if tok.type != "lparen" or head.type != "symbol" or head.value not in DEFINING_FORMS:
            i += 1
            continue

        j = i + 2
        if j >= len(tokens):
            break
        target = tokens[j]
        if target.type == "lparen":
            # (define (name . params) ...) / (define-macro (name . params) ...)
            if j + 1 < len(tokens) and tokens[j + 1].type == "symbol":
                name_tok = tokens[j + 1]
                kind = "macro" if head.value == "define-macro" else "function"
                doc = _docstring(tokens, _skip_form(tokens, j))
            else:
                i = j
                continue
        elif target.type == "symbol":
            name_tok = target
            kind = "var"
            doc = None
            value_at = j + 1
            # (define name (lambda ...)) / (define name (case-lambda "doc" ...))
            if value_at + 1 < len(tokens) and tokens[value_at].type == "lparen" and tokens[value_at + 1].value in ("lambda", "case-lambda"):
                kind = "function"
                if tokens[value_at + 1].value == "case-lambda":
                    doc = _docstring(tokens, value_at + 2)
                else:
                    doc = _docstring(tokens, _skip_form(tokens, value_at + 2))
        else:
            i = j
            continue

        line, col = _position_from_offset(text, name_tok.start)
        idx.symbols[name_tok.value] = SymbolDef(name=name_tok.value, kind=kind, line=line, col=col, doc=doc)
        i = j

    idx.problems = _read_problems(text)
    return idx


# Builtin docstrings for quick hover/completion without eval
BUILTIN_SIGNATURES: Dict[str, str] = builtin_docs()
