from sloth import SExpression, LispValue, EvaluatorFn
from sloth.types.environment import Environment
from sloth.types.errors import LispError, MALFORMED_FORM, TYPE_ERROR
from sloth.types.pair import Pair, lisp_list, make_list, to_list
from sloth.types.symbol import Symbol

QUOTE = Symbol("quote")
QUASIQUOTE = Symbol("quasiquote")
UNQUOTE = Symbol("unquote")
UNQUOTE_SPLICING = Symbol("unquote-splicing")


def _operand(form: Pair) -> SExpression:
    """The single argument of `(quasiquote x)`, `(unquote x)` and friends."""
    rest = form.cdr
    if not isinstance(rest, Pair) or isinstance(rest.cdr, Pair):
        raise LispError(MALFORMED_FORM, f"{form.car} expects exactly 1 argument: {form!r}")
    return rest.car


def eval_quasiquote(
    expr: SExpression,
    env: Environment,
    evaluate_fn: EvaluatorFn,
    depth: int = 1,
) -> SExpression:
    """Copy the template `expr`, evaluating `unquote`d parts at nesting depth 1."""
    if not isinstance(expr, Pair):
        return expr

    head = expr.car
    if head == QUASIQUOTE:
        return lisp_list(QUASIQUOTE, eval_quasiquote(_operand(expr), env, evaluate_fn, depth + 1))
    if head == UNQUOTE:
        if depth == 1:
            return evaluate_fn(_operand(expr), env)
        return lisp_list(UNQUOTE, eval_quasiquote(_operand(expr), env, evaluate_fn, depth - 1))
    if head == UNQUOTE_SPLICING and depth == 1:
        raise LispError(MALFORMED_FORM, f"unquote-splicing outside of a list: {expr!r}")

    items: list[SExpression] = []
    cur: SExpression = expr
    while isinstance(cur, Pair):
        # `(a . ,b)` reads as `(a unquote b)`: the rest is a template on its own.
        if cur is not expr and cur.car in (UNQUOTE, QUASIQUOTE):
            break
        item = cur.car
        if isinstance(item, Pair) and item.car == UNQUOTE_SPLICING and depth == 1:
            spliced = evaluate_fn(_operand(item), env)
            items.extend(to_list(spliced, TYPE_ERROR, "list for unquote-splicing"))
        else:
            items.append(eval_quasiquote(item, env, evaluate_fn, depth))
        cur = cur.cdr
    return make_list(items, eval_quasiquote(cur, env, evaluate_fn, depth))


def quote_form(tail: list[SExpression], env: Environment, evaluate_fn: EvaluatorFn, _: bool) -> LispValue:
    if len(tail) != 1:
        raise LispError(MALFORMED_FORM, "quote expects exactly 1 argument")
    return tail[0]


def quasiquote_form(tail: list[SExpression], env: Environment, evaluate_fn: EvaluatorFn, _: bool) -> LispValue:
    if len(tail) != 1:
        raise LispError(MALFORMED_FORM, "quasiquote expects exactly 1 argument")
    # The template is data; only its unquoted parts are evaluated.
    return eval_quasiquote(tail[0], env, evaluate_fn)


def unquote_form(tail: list[SExpression], env: Environment, evaluate_fn: EvaluatorFn, _: bool) -> LispValue:
    raise LispError(MALFORMED_FORM, "unquote not valid outside of quasiquote")


def unquote_splice_form(tail: list[SExpression], env: Environment, evaluate_fn: EvaluatorFn, _: bool) -> LispValue:
    raise LispError(MALFORMED_FORM, "unquote-splicing not valid outside of quasiquote")
