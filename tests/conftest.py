import pytest

from sloth.interpreter import Interpreter

# Most tests run Lisp source through an Interpreter. `interp` carries the
# prelude (folds, list utilities, cond/assert, the REPL); `bare` has only the
# builtins, for tests of the evaluator core.


@pytest.fixture
def interp():
    return Interpreter()


@pytest.fixture
def bare():
    return Interpreter(prelude=None)
