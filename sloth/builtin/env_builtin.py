"""Built-in functions for the Sloth runtime environment.

This module defines core arithmetic, comparison, list processing, predicates,
error values, reading/printing, evaluation helpers, and registration
utilities exposed to Lisp code. Every builtin is called as `fn(env, args)`.
"""
from __future__ import annotations

import sys
from numbers import Number
from typing import Callable

from sloth import LispValue
from sloth.types.char import Char
from sloth.types.nil import Nil
from sloth.types.environment import Environment
from sloth.types.symbol import Symbol, TRUE, FALSE, lisp_bool
from sloth.types.errors import LispError, ARITY_ERROR, TYPE_ERROR
from sloth.types.pair import Pair, make_list, is_list, to_list
from sloth.types.procedure import Builtin, Macro, Procedure
from sloth.types.tail_call import TailCall
from sloth.types.truth import is_falsey
from sloth.evaluation.apply import apply as apply_engine
from sloth.evaluation.evaluator import evaluate
from sloth.evaluation.macro_expander import gen_sym, macro_expand, macro_expand_1
from sloth.debug_utils.pprint import to_display, to_repr
from sloth.debug_utils.traceback import dump_traceback
from sloth.reader.parser import Reader


def _expect(name: str, args: list[LispValue], count: int) -> None:
    if len(args) != count:
        raise LispError(ARITY_ERROR, f"{name} expects {count} argument(s), got {len(args)}")


def _expect_between(name: str, args: list[LispValue], low: int, high: int) -> None:
    if not low <= len(args) <= high:
        raise LispError(ARITY_ERROR, f"{name} expects {low} to {high} arguments, got {len(args)}")


def _is_number(x: LispValue) -> bool:
    return isinstance(x, Number) and not isinstance(x, bool)


def _numbers(name: str, args: list[LispValue]) -> list[LispValue]:
    for x in args:
        if not _is_number(x):
            raise LispError(TYPE_ERROR, f"{name}: expecting number, got {to_repr(x)}")
    return args


def _pair(name: str, x: LispValue) -> Pair:
    if not isinstance(x, Pair):
        raise LispError(TYPE_ERROR, f"{name}: expecting a pair, got {to_repr(x)}")
    return x


def _error(name: str, x: LispValue) -> LispError:
    if not isinstance(x, LispError):
        raise LispError(TYPE_ERROR, f"{name}: expecting an error value, got {to_repr(x)}")
    return x


# -------------------------------
# Arithmetic
# -------------------------------
def add(env: Environment, args: list[LispValue]) -> LispValue:
    """(+ n...) Sum of the arguments; 0 with none."""
    return sum(_numbers("+", args), 0)


def sub(env: Environment, args: list[LispValue]) -> LispValue:
    """(- n m...) Subtract the rest from the first; negation with one argument."""
    if not args:
        raise LispError(ARITY_ERROR, "- requires at least 1 argument")
    first, *rest = _numbers("-", args)
    if not rest:
        return -first
    for x in rest:
        first -= x
    return first


def mul(env: Environment, args: list[LispValue]) -> LispValue:
    """(* n...) Product of the arguments; 1 with none."""
    result = 1
    for x in _numbers("*", args):
        result *= x
    return result


def _divide(a, b):
    if isinstance(a, int) and isinstance(b, int) and b != 0 and a % b == 0:
        return a // b
    return a / b


def div(env: Environment, args: list[LispValue]) -> LispValue:
    """(/ n m...) Divide left to right; reciprocal with one argument.

    Exact integer quotients stay integers.
    """
    if not args:
        raise LispError(ARITY_ERROR, "/ requires at least 1 argument")
    first, *rest = _numbers("/", args)
    if not rest:
        return _divide(1, first)
    for x in rest:
        first = _divide(first, x)
    return first


def mod(env: Environment, args: list[LispValue]) -> LispValue:
    """(mod n d) Remainder of n divided by d, with the sign of d."""
    _expect("mod", args, 2)
    n, d = _numbers("mod", args)
    return n % d


def _chain(name: str, op: Callable[[LispValue, LispValue], bool]):
    def compare(env: Environment, args: list[LispValue]) -> Symbol:
        _numbers(name, args)
        return lisp_bool(all(op(a, b) for a, b in zip(args, args[1:])))

    compare.__doc__ = f"({name} n m...) true if every adjacent pair satisfies {name}."
    return compare


num_eq = _chain("=", lambda a, b: a == b)
lt = _chain("<", lambda a, b: a < b)
lte = _chain("<=", lambda a, b: a <= b)
gt = _chain(">", lambda a, b: a > b)
gte = _chain(">=", lambda a, b: a >= b)


# -------------------------------
# Equality and predicates
# -------------------------------
def is_eq(a: LispValue, b: LispValue) -> bool:
    """Identity for compound values; value equality for atoms."""
    if a is b:
        return True
    if isinstance(a, (Pair, Procedure, LispError)) or isinstance(b, (Pair, Procedure, LispError)):
        return False
    if _is_number(a) and _is_number(b):
        return a == b
    return type(a) is type(b) and a == b


def eq(env: Environment, args: list[LispValue]) -> Symbol:
    """(eq? a b) true for the same object, or equal atoms."""
    _expect("eq?", args, 2)
    return lisp_bool(is_eq(*args))


def equal(env: Environment, args: list[LispValue]) -> Symbol:
    """(equal? a b) structural equality; lists are compared element by element."""
    _expect("equal?", args, 2)
    a, b = args
    if isinstance(a, Pair) or isinstance(b, Pair):
        return lisp_bool(isinstance(a, Pair) and a == b)
    return lisp_bool(is_eq(a, b))


def logical_not(env: Environment, args: list[LispValue]) -> Symbol:
    """(not x) true if x is falsey (false, 0, () or "")."""
    _expect("not", args, 1)
    return lisp_bool(is_falsey(args[0]))


def _predicate(name: str, test: Callable[[LispValue], bool], doc: str):
    def predicate(env: Environment, args: list[LispValue]) -> Symbol:
        _expect(name, args, 1)
        return lisp_bool(test(args[0]))

    predicate.__doc__ = doc
    return predicate


is_cons = _predicate("cons?", lambda x: isinstance(x, Pair), "(cons? x) true for eager and lazy pairs.")
is_null = _predicate("null?", lambda x: x is Nil, "(null? x) true for the empty list.")
is_list_p = _predicate("list?", is_list, "(list? x) true for () and proper lists.")
is_symbol = _predicate("symbol?", lambda x: isinstance(x, Symbol), "(symbol? x) true for symbols.")
is_string = _predicate("string?", lambda x: isinstance(x, str), "(string? x) true for strings.")
is_number = _predicate("number?", _is_number, "(number? x) true for integers and floats.")
is_char = _predicate("char?", lambda x: isinstance(x, Char), "(char? x) true for characters.")
is_procedure = _predicate(
    "procedure?",
    lambda x: isinstance(x, Procedure) and not isinstance(x, Macro),
    "(procedure? x) true for closures, case-lambdas and builtins.",
)
is_macro = _predicate("macro?", lambda x: isinstance(x, Macro), "(macro? x) true for macros.")
is_error = _predicate("error?", lambda x: isinstance(x, LispError), "(error? x) true for error values.")


def is_bound(env: Environment, args: list[LispValue]) -> Symbol:
    """(bound? 'name) true if name is bound in the calling environment."""
    _expect("bound?", args, 1)
    name = args[0]
    if not isinstance(name, Symbol):
        raise LispError(TYPE_ERROR, f"bound?: expecting a symbol, got {to_repr(name)}")
    return lisp_bool(env.is_bound(name))


# -------------------------------
# Pairs and lists
# -------------------------------
def cons(env: Environment, args: list[LispValue]) -> Pair:
    """(cons x y) A new pair with head x and tail y."""
    _expect("cons", args, 2)
    return Pair(args[0], args[1])


def car(env: Environment, args: list[LispValue]) -> LispValue:
    """(car p) Head of a pair, forcing it if it is deferred."""
    _expect("car", args, 1)
    return _pair("car", args[0]).car


def cdr(env: Environment, args: list[LispValue]) -> LispValue:
    """(cdr p) Tail of a pair, forcing it if it is deferred."""
    _expect("cdr", args, 1)
    return _pair("cdr", args[0]).cdr


def list_builtin(env: Environment, args: list[LispValue]) -> LispValue:
    """(list x...) A proper list of the arguments."""
    return make_list(args)


# -------------------------------
# Evaluation
# -------------------------------
def apply(env: Environment, args: list[LispValue]) -> LispValue | TailCall:
    """(apply f args) Call f with the elements of the list args."""
    _expect("apply", args, 2)
    fn, fn_args = args
    # The callee's body goes back to the trampoline as a tail call.
    return apply_engine(fn, to_list(fn_args, TYPE_ERROR, "argument list"), env, evaluate, True)


def eval_builtin(env: Environment, args: list[LispValue]) -> TailCall:
    """(eval form) Evaluate form in the global environment."""
    _expect("eval", args, 1)
    return TailCall(args[0], env.top_level())


def macro_expand_builtin(env: Environment, args: list[LispValue]) -> LispValue:
    """(macro-expand form) Expand the head of form until it no longer names a macro."""
    _expect("macro-expand", args, 1)
    return macro_expand(args[0], env, evaluate)


def macro_expand_1_builtin(env: Environment, args: list[LispValue]) -> LispValue:
    """(macro-expand-1 form) Expand the head macro of form once."""
    _expect("macro-expand-1", args, 1)
    return macro_expand_1(args[0], env, evaluate)


def gensym(env: Environment, args: list[LispValue]) -> Symbol:
    """(gensym [prefix]) A fresh symbol that no code has used yet."""
    _expect_between("gensym", args, 0, 1)
    prefix = "G"
    if args:
        p = args[0]
        if isinstance(p, Symbol):
            prefix = p.id
        elif isinstance(p, str):
            prefix = p
        else:
            raise LispError(TYPE_ERROR, "gensym prefix must be a Symbol or string")
    return gen_sym(prefix)


def load_file(env: Environment, args: list[LispValue]) -> LispValue:
    """(load-file path) Evaluate every form of a file at top level; returns the last value."""
    _expect("load-file", args, 1)
    path = args[0]
    if not isinstance(path, str):
        raise LispError(TYPE_ERROR, f"load-file: expecting a path string, got {to_repr(path)}")
    # Local import: the loader evaluates through this module's environment.
    from sloth.modules.loader import load_file as load

    return load(path, env)


# -------------------------------
# Errors
# -------------------------------
def throw_error(env: Environment, args: list[LispValue]) -> LispValue:
    """(throw-error kind value) Raise an error; (throw-error err) re-raises a caught one."""
    _expect_between("throw-error", args, 1, 2)
    if len(args) == 1:
        raise _error("throw-error", args[0]).rethrown()
    kind, value = args
    if isinstance(kind, str):
        kind = Symbol(kind)
    if not isinstance(kind, Symbol):
        raise LispError(TYPE_ERROR, f"throw-error: kind must be a symbol, got {to_repr(kind)}")
    raise LispError(kind, value)


def error_type(env: Environment, args: list[LispValue]) -> Symbol:
    """(error-type err) The kind symbol of an error value."""
    _expect("error-type", args, 1)
    return _error("error-type", args[0]).kind


def error_value(env: Environment, args: list[LispValue]) -> LispValue:
    """(error-value err) The payload of an error value."""
    _expect("error-value", args, 1)
    value = _error("error-value", args[0]).value
    return Nil if value is None else value


def error_source(env: Environment, args: list[LispValue]) -> LispValue:
    """(error-source err) The innermost form being evaluated when err was raised, or ()."""
    _expect("error-source", args, 1)
    source = _error("error-source", args[0]).source
    return Nil if source is None else source


def error_trace(env: Environment, args: list[LispValue]) -> LispValue:
    """(error-trace err) The forms err unwound through, innermost first."""
    _expect("error-trace", args, 1)
    return make_list(frame.form for frame in _error("error-trace", args[0]).trace)


def dump_traceback_builtin(env: Environment, args: list[LispValue]) -> LispValue:
    """(dump-traceback err) Print the kind, value, source and trace of err."""
    _expect("dump-traceback", args, 1)
    dump_traceback(_error("dump-traceback", args[0]))
    return Nil


# -------------------------------
# Strings and symbols
# -------------------------------
def string_append(env: Environment, args: list[LispValue]) -> str:
    """(string-append s...) Concatenation of the given strings."""
    for s in args:
        if not isinstance(s, str):
            raise LispError(TYPE_ERROR, f"string-append: expecting string, got {to_repr(s)}")
    return "".join(args)


def symbol_to_string(env: Environment, args: list[LispValue]) -> str:
    """(symbol->string sym) The name of a symbol."""
    _expect("symbol->string", args, 1)
    x = args[0]
    if not isinstance(x, Symbol):
        raise LispError(TYPE_ERROR, f"symbol->string: expecting symbol, got {to_repr(x)}")
    return x.id


def string_to_symbol(env: Environment, args: list[LispValue]) -> Symbol:
    """(string->symbol s) The symbol named s."""
    _expect("string->symbol", args, 1)
    x = args[0]
    if not isinstance(x, str):
        raise LispError(TYPE_ERROR, f"string->symbol: expecting string, got {to_repr(x)}")
    return Symbol(x)


def repr_builtin(env: Environment, args: list[LispValue]) -> str:
    """(repr x) The readable printed form of x, as a string."""
    _expect("repr", args, 1)
    return to_repr(args[0])


# -------------------------------
# Input and output
# -------------------------------
def print_builtin(env: Environment, args: list[LispValue]) -> LispValue:
    """(print x...) Write the display form of each argument; returns ()."""
    sys.stdout.write("".join(to_display(a) for a in args))
    sys.stdout.flush()
    return Nil


def println_builtin(env: Environment, args: list[LispValue]) -> LispValue:
    """(println x...) Like print, followed by a newline."""
    print("".join(to_display(a) for a in args))
    return Nil


def _stdin_lines():
    # sys.stdin is looked up per line so that redirection after startup is honoured.
    while line := sys.stdin.readline():
        yield line


def read(env: Environment, args: list[LispValue]) -> LispValue:
    """(read [port]) The next form from port (standard input by default).

    Raises an eof error at end of input and read-error on malformed text.
    """
    _expect_between("read", args, 0, 1)
    port = args[0] if args else env.lookup(STANDARD_INPUT)
    if not isinstance(port, Reader):
        raise LispError(TYPE_ERROR, f"read: expecting an input port, got {to_repr(port)}")
    return port.read()


def open_input_string(env: Environment, args: list[LispValue]) -> Reader:
    """(open-input-string s) An input port reading forms from s."""
    _expect("open-input-string", args, 1)
    text = args[0]
    if not isinstance(text, str):
        raise LispError(TYPE_ERROR, f"open-input-string: expecting string, got {to_repr(text)}")
    return Reader.from_string(text)


STANDARD_INPUT = Symbol("*standard-input*")

BUILTINS: dict[str, Callable[[Environment, list[LispValue]], LispValue]] = {
    "+": add,
    "-": sub,
    "*": mul,
    "/": div,
    "mod": mod,
    "=": num_eq,
    "<": lt,
    "<=": lte,
    ">": gt,
    ">=": gte,
    "eq?": eq,
    "equal?": equal,
    "not": logical_not,
    "cons?": is_cons,
    "pair?": is_cons,
    "null?": is_null,
    "list?": is_list_p,
    "symbol?": is_symbol,
    "string?": is_string,
    "number?": is_number,
    "char?": is_char,
    "procedure?": is_procedure,
    "macro?": is_macro,
    "error?": is_error,
    "bound?": is_bound,
    "cons": cons,
    "car": car,
    "cdr": cdr,
    "list": list_builtin,
    "apply": apply,
    "eval": eval_builtin,
    "macro-expand": macro_expand_builtin,
    "macro-expand-1": macro_expand_1_builtin,
    "gensym": gensym,
    "load-file": load_file,
    "throw-error": throw_error,
    "error-type": error_type,
    "error-value": error_value,
    "error-source": error_source,
    "error-trace": error_trace,
    "dump-traceback": dump_traceback_builtin,
    "string-append": string_append,
    "symbol->string": symbol_to_string,
    "string->symbol": string_to_symbol,
    "repr": repr_builtin,
    "print": print_builtin,
    "println": println_builtin,
    "read": read,
    "open-input-string": open_input_string,
}


def builtin_docs() -> dict[str, str]:
    """Name -> docstring of every builtin, for editor tooling."""
    return {name: (fn.__doc__ or "").strip() for name, fn in BUILTINS.items()}


def register(env: Environment) -> None:
    """Register all builtin functions and constants into the given environment."""
    env.update({Symbol(name): Builtin(name, fn) for name, fn in BUILTINS.items()})
    env.define(TRUE, TRUE)
    env.define(FALSE, FALSE)
    env.define(Symbol("nil"), Nil)
    env.define(STANDARD_INPUT, Reader(_stdin_lines(), "<stdin>"))
