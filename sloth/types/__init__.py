"""Term types for Sloth: symbols, Nil, pairs, characters, procedures, errors."""

from sloth.types.symbol import Symbol, TRUE, FALSE, lisp_bool
from sloth.types.nil import Nil, NilType
from sloth.types.char import Char
from sloth.types.errors import LispError, ReadError, EndOfInput, Frame
from sloth.types.pair import Pair, LazyPair, Thunk, make_list, lisp_list, to_list, is_list
from sloth.types.environment import Environment
from sloth.types.procedure import Arity, Procedure, Closure, CaseLambda, Macro, Builtin
from sloth.types.truth import is_truthy, is_falsey

__all__ = [
    "Symbol", "TRUE", "FALSE", "lisp_bool",
    "Nil", "NilType",
    "Char",
    "LispError", "ReadError", "EndOfInput", "Frame",
    "Pair", "LazyPair", "Thunk", "make_list", "lisp_list", "to_list", "is_list",
    "Environment",
    "Arity", "Procedure", "Closure", "CaseLambda", "Macro", "Builtin",
    "is_truthy", "is_falsey",
]
