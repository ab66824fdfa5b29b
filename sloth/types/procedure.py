"""Procedure values and argument binding.

The set of procedure kinds is closed: `Closure`, `CaseLambda`, `Macro` and
`Builtin`. The evaluator dispatches on them with `isinstance`/`match`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from sloth import SExpression, LispValue
from sloth.types.environment import Environment
from sloth.types.errors import LispError, ARITY_ERROR, MALFORMED_FORM
from sloth.types.nil import Nil
from sloth.types.pair import Pair, make_list
from sloth.types.symbol import Symbol

BEGIN = Symbol("begin")
LAMBDA = Symbol("lambda")
CASE_LAMBDA = Symbol("case-lambda")


@dataclass(frozen=True)
class Arity:
    """Required parameter names plus an optional name collecting the rest."""

    names: tuple[Symbol, ...]
    rest: Optional[Symbol] = None

    @classmethod
    def parse(cls, params: SExpression) -> Arity:
        """Parse `(a b)`, `(a . rest)` or a bare `args` symbol."""
        names = []
        cur = params
        while isinstance(cur, Pair):
            if not isinstance(cur.car, Symbol):
                raise LispError(MALFORMED_FORM, f"ill-formed argument list {params!r}")
            names.append(cur.car)
            cur = cur.cdr
        if cur is Nil:
            return cls(tuple(names))
        if isinstance(cur, Symbol):
            return cls(tuple(names), cur)
        raise LispError(MALFORMED_FORM, f"invalid argument list {params!r}")

    def accepts(self, count: int) -> bool:
        if self.rest is None:
            return count == len(self.names)
        return count >= len(self.names)

    def bind(self, args: list[LispValue], outer: Environment) -> Environment:
        """Return a child frame of `outer` binding these parameters to `args`."""
        if not self.accepts(len(args)):
            raise LispError(
                ARITY_ERROR,
                f"expecting {self.describe()} argument(s), got {len(args)}",
            )
        frame = Environment(outer=outer)
        for name, value in zip(self.names, args):
            frame.vars[name] = value
        if self.rest is not None:
            frame.vars[self.rest] = make_list(args[len(self.names):])
        return frame

    def describe(self) -> str:
        if self.rest is None:
            return str(len(self.names))
        return f"at least {len(self.names)}"

    def __str__(self) -> str:
        inner = " ".join(str(n) for n in self.names)
        if self.rest is not None:
            return f"({inner} . {self.rest})" if inner else str(self.rest)
        return f"({inner})"


def body_expr(forms: list[SExpression]) -> SExpression:
    """Collapse a body of forms into one expression (an implicit begin)."""
    if not forms:
        return Nil
    if len(forms) == 1:
        return forms[0]
    return Pair(BEGIN, make_list(forms))


def split_doc(forms: list[SExpression]) -> tuple[Optional[str], list[SExpression]]:
    """Separate a leading docstring from a body; a lone string is the body."""
    if len(forms) > 1 and isinstance(forms[0], str):
        return forms[0], forms[1:]
    return None, forms


class Procedure:
    """Common base of everything that can sit in application head position."""

    __slots__ = ()
    kind = "procedure"
    name: Optional[str]
    doc: Optional[str]

    def __repr__(self) -> str:
        name = getattr(self, "name", None)
        if name:
            return f"#<{self.kind}:{name}>"
        return f"#<{self.kind}>"


class Closure(Procedure):
    """A single-arity lambda with its body and capturing environment."""

    __slots__ = ("arity", "body", "env", "name", "doc")
    kind = "procedure"

    def __init__(
        self,
        arity: Arity,
        body: SExpression,
        env: Environment,
        name: Optional[str] = None,
        doc: Optional[str] = None,
    ):
        self.arity = arity
        self.body = body
        self.env = env
        self.name = name
        self.doc = doc

    def bind(self, args: list[LispValue]) -> Environment:
        return self.arity.bind(args, self.env)


class CaseLambda(Procedure):
    """Several closures dispatched by argument count, in declaration order."""

    __slots__ = ("clauses", "name", "doc")
    kind = "case-lambda"

    def __init__(
        self,
        clauses: tuple[Closure, ...],
        name: Optional[str] = None,
        doc: Optional[str] = None,
    ):
        if not clauses:
            raise LispError(MALFORMED_FORM, "(case-lambda) must contain at least one clause")
        self.clauses = clauses
        self.name = name
        self.doc = doc

    def select(self, count: int) -> Closure:
        """First clause whose arity accepts `count` arguments."""
        for clause in self.clauses:
            if clause.arity.accepts(count):
                return clause
        arities = ", ".join(str(c.arity) for c in self.clauses)
        raise LispError(
            ARITY_ERROR,
            f"no clause of {self.name or 'case-lambda'} accepts {count} argument(s); have {arities}",
        )


class Macro(Procedure):
    """A transformer applied to unevaluated argument terms."""

    __slots__ = ("arity", "body", "env", "name", "doc")
    kind = "macro"

    def __init__(
        self,
        arity: Arity,
        body: SExpression,
        env: Environment,
        name: Optional[str] = None,
        doc: Optional[str] = None,
    ):
        self.arity = arity
        self.body = body
        self.env = env
        self.name = name
        self.doc = doc


class Builtin(Procedure):
    """A host function called as `fn(env, args)`."""

    __slots__ = ("name", "fn", "doc")
    kind = "builtin"

    def __init__(
        self,
        name: str,
        fn: Callable[[Environment, list[LispValue]], LispValue],
        doc: Optional[str] = None,
    ):
        self.name = name
        self.fn = fn
        self.doc = doc if doc is not None else fn.__doc__


def with_name(value: LispValue, name: Symbol, expr: SExpression) -> LispValue:
    """Name the procedure `expr` just created after the symbol it is defined as.

    Only a literal lambda or case-lambda form makes a fresh procedure; any other
    expression may return one that is shared and keeps its own name.
    """
    if not (isinstance(expr, Pair) and expr.car in (LAMBDA, CASE_LAMBDA)):
        return value
    if isinstance(value, (Closure, CaseLambda)) and value.name is None:
        value.name = str(name)
        if isinstance(value, CaseLambda):
            for clause in value.clauses:
                clause.name = value.name
    return value
