"""Error values and the exceptions that carry them.

A `LispError` is both the Python exception that propagates a failure through
the evaluator and the first-class error value handed back by `catch-error`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from sloth.types.symbol import Symbol

# Error kinds raised by the core.
READ_ERROR = Symbol("read-error")
EOF = Symbol("eof")
UNBOUND_SYMBOL = Symbol("unbound-symbol")
NOT_APPLICABLE = Symbol("not-applicable")
ARITY_ERROR = Symbol("arity-error")
MALFORMED_FORM = Symbol("malformed-form")
ASSERTION_ERROR = Symbol("assertion-error")
TYPE_ERROR = Symbol("type-error")
ARITHMETIC_ERROR = Symbol("arithmetic-error")
MACRO_EXPANSION_ERROR = Symbol("macro-expansion-error")
IO_ERROR = Symbol("io-error")
RECURSION_ERROR = Symbol("recursion-error")


@dataclass(frozen=True)
class Frame:
    """One evaluation step active when an error unwound through it."""

    form: Any
    name: Optional[str] = None


class LispError(Exception):
    """Base class for all Sloth failures.

    kind   -- a Symbol classifying the failure (`arity-error`, user kinds, ...)
    value  -- the payload: a message string or any Lisp value
    source -- the innermost form being evaluated when the error was raised
    trace  -- Frames appended innermost-first while the error unwinds
    cause  -- the error this one was raised from, if any
    """

    def __init__(
        self,
        kind: Symbol | str,
        value: Any = None,
        source: Any = None,
        cause: Optional[LispError] = None,
    ):
        self.kind: Symbol = kind if isinstance(kind, Symbol) else Symbol(kind)
        self.value: Any = value
        self.source: Any = source
        self.cause: Optional[LispError] = cause
        self.trace: list[Frame] = []
        self.elided: int = 0
        super().__init__(f"{self.kind}: {value}")

    def push_frame(self, form: Any, name: Optional[str], limit: int) -> None:
        """Record an evaluation frame the error is unwinding through."""
        if self.source is None:
            self.source = form
        if len(self.trace) < limit:
            self.trace.append(Frame(form, name))
        else:
            self.elided += 1

    def rethrown(self) -> LispError:
        """A copy to raise again; it extends its own trace and leaves this one as caught."""
        err = LispError(self.kind, self.value, source=self.source, cause=self.cause)
        err.trace = list(self.trace)
        err.elided = self.elided
        return err

    def chain(self) -> list[LispError]:
        """This error followed by its causes, outermost first."""
        out = []
        err: Optional[LispError] = self
        while err is not None:
            out.append(err)
            err = err.cause
        return out

    def __repr__(self) -> str:
        from sloth.debug_utils.pprint import to_repr

        return to_repr(self)


class ReadError(LispError):
    """Raised by the reader on malformed input."""

    def __init__(self, message: str, offset: int | None = None, kind: Symbol = READ_ERROR):
        super().__init__(kind, message)
        self.offset = offset


class EndOfInput(ReadError):
    """Raised by the reader when the input is exhausted between forms."""

    def __init__(self, message: str = "end of input", offset: int | None = None):
        super().__init__(message, offset, kind=EOF)


class IncompleteInput(ReadError):
    """Raised when input ends in the middle of a form."""
