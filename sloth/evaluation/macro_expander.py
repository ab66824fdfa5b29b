"""Macro expansion.

Macros are non-hygienic: a macro body is evaluated with its parameters bound to
the *unevaluated* argument terms, and the resulting term replaces the call site.
`gen_sym` produces fresh symbols for macro authors who need temporaries.
"""

from __future__ import annotations

import itertools
import logging
from typing import Optional

from sloth import EvaluatorFn, SExpression
from sloth.types.environment import Environment
from sloth.types.errors import LispError, MACRO_EXPANSION_ERROR, MALFORMED_FORM
from sloth.types.pair import Pair, to_list
from sloth.types.procedure import Macro
from sloth.types.symbol import Symbol

logger = logging.getLogger(__name__)

_gensym_counter = itertools.count(1)


def gen_sym(prefix: str = "G") -> Symbol:
    """Return a fresh symbol `prefix` + counter, e.g. G17."""
    return Symbol(f"{prefix}{next(_gensym_counter)}")


def expand_1(macro: Macro, args: list[SExpression], evaluate_fn: EvaluatorFn) -> SExpression:
    """Run `macro` once on the argument terms `args`.

    Any failure while expanding is re-raised as a macro-expansion-error whose
    cause is the original error.
    """
    try:
        frame = macro.arity.bind(args, macro.env)
        expansion = evaluate_fn(macro.body, frame, macro.name)
    except LispError as err:
        raise LispError(
            MACRO_EXPANSION_ERROR,
            f"error expanding macro {macro.name}",
            cause=err,
        ) from err
    logger.debug("expanded %s -> %r", macro.name, expansion)
    return expansion


def macro_of(form: SExpression, env: Environment) -> Optional[Macro]:
    """The macro named by the head of `form`, if it has one."""
    if isinstance(form, Pair) and isinstance(form.car, Symbol):
        # Local import: the special form table imports this module.
        from sloth.evaluation.special_forms import SPECIAL_FORMS

        if form.car in SPECIAL_FORMS:
            return None
        owner = env.find(form.car)
        if owner is not None:
            value = owner.vars[form.car]
            if isinstance(value, Macro):
                return value
    return None


def macro_expand_1(form: SExpression, env: Environment, evaluate_fn: EvaluatorFn) -> SExpression:
    """Expand `form` once if its head names a macro; otherwise return it unchanged."""
    macro = macro_of(form, env)
    if macro is None:
        return form
    return expand_1(macro, to_list(form.cdr, MALFORMED_FORM, "form"), evaluate_fn)


def macro_expand(form: SExpression, env: Environment, evaluate_fn: EvaluatorFn) -> SExpression:
    """Expand the head of `form` repeatedly until it no longer names a macro."""
    while True:
        macro = macro_of(form, env)
        if macro is None:
            return form
        form = expand_1(macro, to_list(form.cdr, MALFORMED_FORM, "form"), evaluate_fn)
