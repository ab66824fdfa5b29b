"""Application engine for Sloth.

Centralizes procedure application for the evaluator, the special forms and
the builtins that call back into Lisp code (`apply`, `eval`):
- Closures and case-lambda clauses bind a fresh frame and run their body,
  returning a TailCall when the call is in tail position.
- Builtins are called as `fn(env, args)` with the caller's environment.
"""

from __future__ import annotations

from sloth import LispValue, EvaluatorFn
from sloth.types.environment import Environment
from sloth.types.errors import LispError, ARITHMETIC_ERROR, NOT_APPLICABLE
from sloth.types.procedure import Builtin, CaseLambda, Closure, Macro
from sloth.types.tail_call import TailCall, in_tail


def apply_closure(
    fn: Closure,
    args: list[LispValue],
    evaluate_fn: EvaluatorFn,
    is_tail_call: bool,
) -> LispValue | TailCall:
    """Bind `args` to the parameters of `fn` and run its body."""
    frame = fn.bind(args)
    return in_tail(fn.body, frame, evaluate_fn, is_tail_call, fn.name)


def apply(
    fn: LispValue,
    args: list[LispValue],
    env: Environment,
    evaluate_fn: EvaluatorFn,
    is_tail_call: bool = False,
) -> LispValue | TailCall:
    """Apply an evaluated procedure to already-evaluated arguments."""
    match fn:
        case Closure():
            return apply_closure(fn, args, evaluate_fn, is_tail_call)
        case CaseLambda():
            return apply_closure(fn.select(len(args)), args, evaluate_fn, is_tail_call)
        case Builtin():
            try:
                result = fn.fn(env, args)
            except ArithmeticError as ex:
                raise LispError(ARITHMETIC_ERROR, f"{fn.name}: {ex}") from ex
            # Builtins such as `apply` and `eval` hand back a TailCall.
            if isinstance(result, TailCall) and not is_tail_call:
                return evaluate_fn(result.expr, result.env, result.name)
            return result
        case Macro():
            raise LispError(NOT_APPLICABLE, f"macro {fn.name} cannot be applied to evaluated arguments")
    raise LispError(NOT_APPLICABLE, f"{fn!r} is not a procedure")
