from sloth import EvaluatorFn
from sloth import SExpression, LispValue
from sloth.types.environment import Environment
from sloth.types.errors import LispError, MALFORMED_FORM
from sloth.types.pair import Pair, to_list
from sloth.types.procedure import body_expr
from sloth.types.symbol import Symbol
from sloth.types.tail_call import in_tail


def let_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
    is_tail_call: bool = False,
) -> LispValue:
    """(let ((name expr)...) body...)

    Every expr is evaluated in the enclosing environment, so bindings cannot
    see their siblings; the body then runs in one child frame holding them all.
    """
    if not tail:
        raise LispError(MALFORMED_FORM, "let requires a binding list")

    bindings = []
    for binding in to_list(tail[0], MALFORMED_FORM, "let binding list"):
        parts = to_list(binding, MALFORMED_FORM, "let binding") if isinstance(binding, Pair) else None
        if parts is None or len(parts) != 2 or not isinstance(parts[0], Symbol):
            raise LispError(MALFORMED_FORM, f"let binding must be (name expr), got {binding!r}")
        name, expr = parts
        bindings.append((name, evaluate_fn(expr, env)))

    frame = Environment(outer=env)
    for name, value in bindings:
        frame.define(name, value)
    return in_tail(body_expr(tail[1:]), frame, evaluate_fn, is_tail_call)
