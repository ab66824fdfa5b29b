"""Registry of special forms for the Sloth evaluator.

Maps Symbols to handler functions that implement non-standard evaluation rules.
The evaluator consults this table to dispatch special forms before ordinary
function application. Handlers are called as
`handler(args, env, evaluate_fn, is_tail_call)`.
"""

from sloth.types.symbol import Symbol
from sloth.evaluation.special_forms.set_form import set_form
from sloth.evaluation.special_forms.progn_form import begin_form
from sloth.evaluation.special_forms.define_macro_form import define_macro_form
from sloth.evaluation.special_forms.quote_forms import quote_form, quasiquote_form, unquote_form, unquote_splice_form
from sloth.evaluation.special_forms.lambda_form import lambda_form, case_lambda_form
from sloth.evaluation.special_forms.define_form import define_form
from sloth.evaluation.special_forms.if_form import if_form
from sloth.evaluation.special_forms.let_form import let_form
from sloth.evaluation.special_forms.logic_forms import and_form, or_form
from sloth.evaluation.special_forms.lazy_cons_form import lazy_cons_form
from sloth.evaluation.special_forms.catch_error_form import catch_error_form

SPECIAL_FORMS = {
    Symbol("set!"): set_form,
    Symbol("begin"): begin_form,
    Symbol("define-macro"): define_macro_form,
    Symbol("quote"): quote_form,
    Symbol("quasiquote"): quasiquote_form,
    Symbol("unquote"): unquote_form,
    Symbol("unquote-splicing"): unquote_splice_form,
    Symbol("lambda"): lambda_form,
    Symbol("case-lambda"): case_lambda_form,
    Symbol("define"): define_form,
    Symbol("if"): if_form,
    Symbol("let"): let_form,
    Symbol("and"): and_form,
    Symbol("or"): or_form,
    Symbol("lazy-cons"): lazy_cons_form,
    Symbol("catch-error"): catch_error_form,
}
