from sloth import EvaluatorFn
from sloth import SExpression, LispValue
from sloth.types.environment import Environment
from sloth.types.nil import Nil
from sloth.types.tail_call import in_tail


def begin_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
    is_tail_call: bool = False,
) -> LispValue:
    if not tail:
        return Nil
    for e in tail[:-1]:
        evaluate_fn(e, env)
    return in_tail(tail[-1], env, evaluate_fn, is_tail_call)
