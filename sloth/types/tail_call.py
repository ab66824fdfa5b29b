from __future__ import annotations

from typing import Optional

from sloth import SExpression
from sloth.types.environment import Environment


class TailCall:
    """An expression left for the trampoline to evaluate in place of a call."""

    __slots__ = ("expr", "env", "name")

    def __init__(self, expr: SExpression, env: Environment, name: Optional[str] = None):
        self.expr = expr
        self.env = env
        # Procedure whose body `expr` belongs to, reported in tracebacks
        self.name = name


def in_tail(expr: SExpression, env: Environment, evaluate_fn, is_tail_call: bool, name: Optional[str] = None):
    """Evaluate `expr` now, or hand it back to the trampoline when in tail position."""
    if is_tail_call:
        return TailCall(expr, env, name)
    return evaluate_fn(expr, env, name)
