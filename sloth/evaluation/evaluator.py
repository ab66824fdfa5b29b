"""Core evaluator and trampoline for the Sloth interpreter.

Implements special-form dispatch, macro expansion in head position and
tail-call aware application via a trampoline over TailCall objects. Every
LispError unwinding through `evaluate` records the form being evaluated, which
is what tracebacks are built from.
"""

from __future__ import annotations

from typing import Optional

from sloth import SExpression, LispValue
from sloth.config import get_traceback_limit
from sloth.types.environment import Environment
from sloth.types.errors import LispError, MALFORMED_FORM, NOT_APPLICABLE
from sloth.types.pair import Pair, to_list
from sloth.types.procedure import Macro, Procedure
from sloth.types.symbol import Symbol
from sloth.types.tail_call import TailCall
from sloth.evaluation.apply import apply
from sloth.evaluation.macro_expander import expand_1
from sloth.evaluation.special_forms import SPECIAL_FORMS

TRACEBACK_LIMIT = get_traceback_limit()


def evaluate(expr: SExpression, env: Environment, name: Optional[str] = None) -> LispValue:
    """
    Trampoline evaluator: tail-call aware evaluation.

    `name` is the procedure whose body `expr` is, if any; it is only used to
    label traceback frames.
    """
    try:
        result = evaluate0(expr, env, True)  # Start in 'tail' mode.
        while isinstance(result, TailCall):
            expr, env, name = result.expr, result.env, result.name
            result = evaluate0(expr, env, True)
        return result
    except LispError as err:
        err.push_frame(expr, name, TRACEBACK_LIMIT)
        raise


def evaluate0(expr: SExpression, env: Environment, is_tail_call: bool = False) -> LispValue:
    """
    Core evaluator: single-step evaluation with tail-call awareness.
    Returns either a value or a TailCall.
    """
    match expr:
        case Symbol():
            return env.lookup(expr)

        case Pair():
            head = expr.car
            args = to_list(expr.cdr, MALFORMED_FORM, "form")

            # --- Special forms handling ---
            if isinstance(head, Symbol):
                handler = SPECIAL_FORMS.get(head)
                if handler is not None:
                    return handler(args, env, evaluate, is_tail_call)

            fn = evaluate(head, env)

            if isinstance(fn, Macro):
                # The expansion replaces the form, so it stays in tail position.
                expansion = expand_1(fn, args, evaluate)
                if is_tail_call:
                    return TailCall(expansion, env)
                return evaluate(expansion, env)

            if not isinstance(fn, Procedure):
                raise LispError(NOT_APPLICABLE, f"{fn!r} is not a procedure")

            values = [evaluate(arg, env) for arg in args]
            return apply(fn, values, env, evaluate, is_tail_call)

    # --- Atoms return as-is ---
    return expr
