# Error interception
# Usage:
#   (catch-error (throw-error 'my-kind 42))   ; => #<error my-kind: 42>
#   (catch-error (+ 1 2))                     ; => 3
#
#   (let ((e (catch-error (car '()))))
#     (error-type e))                         ; => type-error


from sloth import EvaluatorFn
from sloth import SExpression, LispValue
from sloth.types.environment import Environment
from sloth.types.errors import LispError, RECURSION_ERROR
from sloth.types.pair import make_list
from sloth.types.procedure import body_expr
from sloth.types.symbol import Symbol

CATCH_ERROR = Symbol("catch-error")


def catch_error_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
    is_tail_call: bool = False,
) -> LispValue:
    """
    (catch-error body...)

    Evaluates the body like begin. A failure escaping the body is returned as
    an error value instead of propagating further. The body is never handed
    back to the trampoline: the error has to surface inside this call.
    """
    try:
        return evaluate_fn(body_expr(tail), env)
    except LispError as err:
        return err
    except RecursionError:
        return LispError(
            RECURSION_ERROR,
            "maximum recursion depth exceeded",
            source=make_list([CATCH_ERROR, *tail]),
        )
