"""Cons cells: eager `Pair`, deferred `LazyPair`, and list helpers."""

from __future__ import annotations

from typing import Any, Iterable, Iterator

from sloth import EvaluatorFn, LispValue, SExpression
from sloth.types.errors import LispError, TYPE_ERROR
from sloth.types.nil import Nil


class Pair:
    """An immutable cons cell."""

    __slots__ = ("_car", "_cdr")

    def __init__(self, car: LispValue, cdr: LispValue = Nil):
        self._car = car
        self._cdr = cdr

    @property
    def car(self) -> LispValue:
        return self._car

    @property
    def cdr(self) -> LispValue:
        return self._cdr

    def __iter__(self) -> Iterator[LispValue]:
        """Iterate the elements of the proper prefix of this list."""
        cur: Any = self
        while isinstance(cur, Pair):
            yield cur.car
            cur = cur.cdr

    def __eq__(self, other) -> bool:
        # Walk the spine iteratively so long lists do not recurse per element.
        a, b = self, other
        while isinstance(a, Pair) and isinstance(b, Pair):
            if a is b:
                return True
            if a.car != b.car:
                return False
            a, b = a.cdr, b.cdr
        if isinstance(a, Pair) or isinstance(b, Pair):
            return False
        return a == b

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        from sloth.debug_utils.pprint import to_repr

        return to_repr(self)


class Thunk:
    """A suspended expression, evaluated at most once in its captured env."""

    __slots__ = ("expr", "env", "evaluate_fn", "value", "forced")

    def __init__(self, expr: SExpression, env, evaluate_fn: EvaluatorFn):
        self.expr = expr
        self.env = env
        self.evaluate_fn = evaluate_fn
        self.value: LispValue = None
        self.forced = False

    def force(self) -> LispValue:
        if not self.forced:
            # A failing evaluation leaves the thunk unforced.
            self.value = self.evaluate_fn(self.expr, self.env)
            self.forced = True
            self.expr = self.env = self.evaluate_fn = None
        return self.value


class LazyPair(Pair):
    """A pair whose slots may hold Thunks, forced on first access."""

    __slots__ = ()

    @property
    def car(self) -> LispValue:
        if isinstance(self._car, Thunk):
            self._car = self._car.force()
        return self._car

    @property
    def cdr(self) -> LispValue:
        if isinstance(self._cdr, Thunk):
            self._cdr = self._cdr.force()
        return self._cdr

    def is_forced(self, slot: str) -> bool:
        """Whether `car` or `cdr` has been computed yet (without forcing it)."""
        raw = self._car if slot == "car" else self._cdr
        return not isinstance(raw, Thunk)

    def peek(self, slot: str) -> LispValue:
        """Raw slot contents: a value, or the pending Thunk."""
        return self._car if slot == "car" else self._cdr


def make_list(items: Iterable[LispValue], tail: LispValue = Nil) -> LispValue:
    """Build a Lisp list from a Python iterable, ending in `tail`."""
    out = tail
    for item in reversed(list(items)):
        out = Pair(item, out)
    return out


def lisp_list(*items: LispValue) -> LispValue:
    return make_list(items)


def is_list(term: LispValue) -> bool:
    """True for Nil and proper lists."""
    while isinstance(term, Pair):
        term = term.cdr
    return term is Nil


def to_list(term: LispValue, kind=TYPE_ERROR, what: str = "list") -> list[LispValue]:
    """Flatten a proper Lisp list into a Python list.

    Raises a LispError of `kind` if `term` is not a proper list.
    """
    out = []
    cur = term
    while isinstance(cur, Pair):
        out.append(cur.car)
        cur = cur.cdr
    if cur is not Nil:
        raise LispError(kind, f"not a proper {what}: {term!r}")
    return out
