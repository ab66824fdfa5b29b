from sloth import EvaluatorFn
from sloth import SExpression, LispValue
from sloth.types.errors import LispError, MALFORMED_FORM
from sloth.types.pair import Pair
from sloth.types.procedure import with_name
from sloth.types.symbol import Symbol
from sloth.types.environment import Environment
from sloth.evaluation.special_forms.lambda_form import make_closure


def define_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
    _: bool,
) -> LispValue:
    """
    (define name value)
    (define (name . params) ["doc"] body...)

    Binds in the current frame and returns the defined symbol.
    Tail-call awareness is irrelevant here, since define does not produce a value to be tail-called.
    """
    if not tail:
        raise LispError(MALFORMED_FORM, "define requires a name")

    target = tail[0]
    if isinstance(target, Pair):
        # Function shorthand
        name = target.car
        if not isinstance(name, Symbol):
            raise LispError(MALFORMED_FORM, f"define must have a symbol name, not {name!r}")
        value = make_closure(target.cdr, tail[1:], env, str(name))
        env.define(name, value)
        return name

    if not isinstance(target, Symbol):
        raise LispError(MALFORMED_FORM, f"define must have a symbol name, not {target!r}")
    if len(tail) != 2:
        raise LispError(MALFORMED_FORM, f"define of {target} requires exactly 1 value expression")

    value = evaluate_fn(tail[1], env)  # normal evaluation
    env.define(target, with_name(value, target, tail[1]))
    return target
