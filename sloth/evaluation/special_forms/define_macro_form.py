"""Special form: define-macro.

Defines a macro transformer in the current frame using a lambda-like body.
"""

from __future__ import annotations

from sloth import EvaluatorFn, SExpression, LispValue
from sloth.types.errors import LispError, MALFORMED_FORM
from sloth.types.symbol import Symbol
from sloth.types.pair import Pair
from sloth.types.procedure import Arity, Macro, body_expr, split_doc
from sloth.types.environment import Environment


def define_macro_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
    _: bool,
) -> LispValue:
    """(define-macro (name . params) ["doc"] body...) binds a Macro and returns its name."""
    if len(tail) < 2:
        raise LispError(MALFORMED_FORM, "define-macro requires (name . params) and a body")

    signature = tail[0]
    if not isinstance(signature, Pair) or not isinstance(signature.car, Symbol):
        raise LispError(MALFORMED_FORM, f"invalid macro definition: {signature!r}")

    macro_name = signature.car
    doc, body = split_doc(tail[1:])
    macro = Macro(Arity.parse(signature.cdr), body_expr(body), env, str(macro_name), doc)

    # Macros live in the same namespace as every other value
    env.define(macro_name, macro)
    return macro_name
