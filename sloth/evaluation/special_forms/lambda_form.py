from sloth import EvaluatorFn
from sloth import SExpression, LispValue
from sloth.types.environment import Environment
from sloth.types.errors import LispError, MALFORMED_FORM
from sloth.types.pair import Pair, to_list
from sloth.types.procedure import Arity, CaseLambda, Closure, body_expr, split_doc


def make_closure(
    params: SExpression,
    body_forms: list[SExpression],
    env: Environment,
    name: str | None = None,
) -> Closure:
    """Build a Closure from a parameter list and body forms (implicit begin).

    A leading string in a body of two or more forms is the docstring.
    With no body forms, calling the closure returns Nil.
    """
    doc, body = split_doc(body_forms)
    return Closure(Arity.parse(params), body_expr(body), env, name, doc)


def lambda_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
    _: bool,
) -> LispValue:
    if not tail:
        raise LispError(MALFORMED_FORM, "lambda requires at least a parameter list")
    return make_closure(tail[0], tail[1:], env)


def case_lambda_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
    _: bool,
) -> LispValue:
    """(case-lambda ["doc"] (params body...) ...)

    Clauses are kept in declaration order; application picks the first one
    whose parameter list accepts the argument count.
    """
    doc = None
    clauses = tail
    if clauses and isinstance(clauses[0], str):
        doc, clauses = clauses[0], clauses[1:]

    closures = []
    for clause in clauses:
        if not isinstance(clause, Pair):
            raise LispError(MALFORMED_FORM, f"case-lambda clause must be (params body...), got {clause!r}")
        params, *body = to_list(clause, MALFORMED_FORM, "case-lambda clause")
        closures.append(make_closure(params, body, env))
    return CaseLambda(tuple(closures), doc=doc)
