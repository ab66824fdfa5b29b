from sloth import SExpression, EvaluatorFn
from sloth.types.environment import Environment
from sloth.types.symbol import TRUE, FALSE
from sloth.types.tail_call import in_tail
from sloth.types.truth import is_falsey, is_truthy


def and_form(tail: list[SExpression], env: Environment, evaluate_fn: EvaluatorFn, is_tail_call: bool = False) -> SExpression:
    """Short-circuiting logical AND special form.

    (and a b c ...) evaluates each operand left-to-right until a falsey value
    is found, which is returned immediately. If all operands are truthy,
    returns the value of the last operand. With zero operands, returns true.
    """
    if not tail:
        return TRUE

    for expr in tail[:-1]:
        val = evaluate_fn(expr, env)
        if is_falsey(val):
            return val
    # Only the final operand is in tail position
    return in_tail(tail[-1], env, evaluate_fn, is_tail_call)


def or_form(tail: list[SExpression], env: Environment, evaluate_fn: EvaluatorFn, is_tail_call: bool = False) -> SExpression:
    """Short-circuiting logical OR special form.

    (or a b c ...) evaluates each operand left-to-right and returns the first
    truthy value, or the value of the last operand. With zero operands,
    returns false.
    """
    if not tail:
        return FALSE

    for expr in tail[:-1]:
        val = evaluate_fn(expr, env)
        if is_truthy(val):
            return val
    return in_tail(tail[-1], env, evaluate_fn, is_tail_call)
