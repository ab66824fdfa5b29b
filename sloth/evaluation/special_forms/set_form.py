from sloth import EvaluatorFn
from sloth import SExpression, LispValue
from sloth.types.errors import LispError, MALFORMED_FORM
from sloth.types.symbol import Symbol
from sloth.types.environment import Environment


def set_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
    is_tail_call: bool = False,
) -> LispValue:
    """(set! name value): rebind `name` where it is bound; returns the old value."""
    if len(tail) != 2:
        raise LispError(MALFORMED_FORM, "set! requires exactly 2 arguments: (set! var value)")
    var_sym, val_expr = tail
    if not isinstance(var_sym, Symbol):
        raise LispError(MALFORMED_FORM, f"set! first argument must be a Symbol, got {var_sym!r}")
    value = evaluate_fn(val_expr, env)
    return env.set(var_sym, value)
