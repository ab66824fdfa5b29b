from sloth import EvaluatorFn
from sloth import SExpression, LispValue
from sloth.types.environment import Environment
from sloth.types.errors import LispError, MALFORMED_FORM
from sloth.types.pair import LazyPair, Thunk


def lazy_cons_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
    _: bool,
) -> LispValue:
    """(lazy-cons head tail): a pair whose slots are evaluated on first access.

    Each slot is computed at most once; `car`/`cdr` see the memoized value.
    """
    if len(tail) != 2:
        raise LispError(MALFORMED_FORM, "lazy-cons requires exactly 2 arguments")
    head, rest = tail
    return LazyPair(Thunk(head, env, evaluate_fn), Thunk(rest, env, evaluate_fn))
