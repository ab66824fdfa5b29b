from sloth import EvaluatorFn
from sloth import SExpression, LispValue
from sloth.types.errors import LispError, MALFORMED_FORM
from sloth.types.nil import Nil
from sloth.types.environment import Environment
from sloth.types.tail_call import in_tail
from sloth.types.truth import is_truthy


def if_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
    is_tail_call: bool = False,
) -> LispValue:
    if len(tail) not in (2, 3):
        raise LispError(MALFORMED_FORM, "if requires a condition, a then-expression and an optional else")

    # Falsey: false, 0, () and "". Everything else is true.
    if is_truthy(evaluate_fn(tail[0], env)):
        return in_tail(tail[1], env, evaluate_fn, is_tail_call)
    elif len(tail) > 2:
        return in_tail(tail[2], env, evaluate_fn, is_tail_call)
    else:
        return Nil
