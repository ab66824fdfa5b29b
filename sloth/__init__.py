# Core type aliases for Sloth's data model.
# Code and data share one representation: Symbols, Nil, Pairs (eager or lazy),
# Python int/float/str, Char, procedures and error values.
#
# Naming guidance:
# - SExpression: Use in reader/macro code to denote syntactic forms (code-as-data).
# - LispValue:  Use in evaluator/runtime code to denote evaluated values.
# Both aliases resolve to `Any` and are interchangeable.

from typing import Any, Callable

# Runtime value alias
LispValue = Any
# Forms alias (often used interchangeably with LispValue)
SExpression = LispValue

# Evaluator function type: evaluator entry point handed to special forms
EvaluatorFn = Callable[..., LispValue]

__version__ = "0.3.0"
