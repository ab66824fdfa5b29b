from sloth import LispValue
from sloth.types.nil import Nil
from sloth.types.symbol import FALSE, Symbol


def is_falsey(value: LispValue) -> bool:
    """Falsey values: the symbol `false`, the integer 0, Nil and the empty string."""
    if value is Nil:
        return True
    if isinstance(value, Symbol):
        return value == FALSE
    if type(value) is int:
        return value == 0
    if type(value) is str:
        return value == ""
    return False


def is_truthy(value: LispValue) -> bool:
    return not is_falsey(value)
