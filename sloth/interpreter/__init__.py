from __future__ import annotations
import logging
from pathlib import Path
from typing import Callable, Literal

from sloth import SExpression, LispValue
from sloth.reader.parser import Reader
from sloth.types.errors import LispError, RECURSION_ERROR
from sloth.types.nil import Nil
from sloth.types.environment import Environment
from sloth.builtin.env_builtin import register

logger = logging.getLogger(__name__)


class Interpreter:
    """
    Orchestrates reading and evaluating Sloth code.
    Owns the global Environment (builtins plus prelude) for one session.
    """

    def __init__(
        self,
        eval_fn: Callable[[SExpression, Environment], LispValue] | None = None,
        prelude: str | None | Literal['auto'] = 'auto',
    ):
        if eval_fn is None:
            from sloth.evaluation.evaluator import evaluate
            eval_fn = evaluate
        self.eval_fn = eval_fn
        self.env: Environment = Environment()
        register(self.env)

        if prelude is None:
            pass  # explicit: no prelude
        elif prelude == 'auto':
            try:
                # Lazy import to avoid circular imports
                from sloth.modules.loader import load_prelude
                load_prelude(self)
            except FileNotFoundError as ex:
                # Be permissive: no prelude found -> proceed with builtins only
                logger.warning("%s", ex)
        elif prelude:
            self.eval_prelude(prelude)

    def eval_prelude(self, code: str) -> None:
        for expr in Reader.from_string(code, "<prelude>"):
            self.eval_fn(expr, self.env)

    def eval(self, code: str) -> LispValue:
        """Evaluate every form in `code`; returns the value of the last one."""
        result: LispValue = Nil
        for expr in Reader.from_string(code):
            try:
                result = self.eval_fn(expr, self.env)
            except RecursionError as ex:
                raise LispError(RECURSION_ERROR, "maximum recursion depth exceeded", source=expr) from ex
        return result

    def load(self, path: str | Path) -> LispValue:
        from sloth.modules.loader import load_file
        try:
            return load_file(path, self.env)
        except RecursionError as ex:
            raise LispError(RECURSION_ERROR, f"maximum recursion depth exceeded loading {path}") from ex
