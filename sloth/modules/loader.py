from __future__ import annotations
import logging
from pathlib import Path
from typing import Optional, Protocol

from sloth import LispValue
from sloth.config import get_load_path, get_prelude_root
from sloth.reader.parser import Reader
from sloth.types.environment import Environment
from sloth.types.errors import LispError, IO_ERROR
from sloth.types.nil import Nil

logger = logging.getLogger(__name__)


class _HasEnv(Protocol):
    env: Environment


def resolve_path(path: str | Path) -> Optional[Path]:
    """Find `path` as given, then under each directory of SLOTH_PATH."""
    candidate = Path(path)
    if candidate.is_file():
        return candidate
    if candidate.is_absolute():
        return None
    for root in get_load_path():
        found = root / candidate
        if found.is_file():
            return found
    return None


def load_file(path: str | Path, env: Environment) -> LispValue:
    """Evaluate every top-level form of a file in the global frame of `env`.

    Returns the value of the last form. The first failure aborts the load and
    propagates to the caller.
    """
    # Local import: the evaluator's builtins import this module.
    from sloth.evaluation.evaluator import evaluate

    resolved = resolve_path(path)
    if resolved is None:
        raise LispError(IO_ERROR, f"cannot open file: {path}")
    try:
        text = resolved.read_text(encoding="utf-8")
    except OSError as ex:
        raise LispError(IO_ERROR, f"cannot read file {path}: {ex.strerror}") from ex

    logger.debug("loading %s", resolved)
    top_level = env.top_level()
    result: LispValue = Nil
    count = 0
    for form in Reader.from_string(text, str(resolved)):
        result = evaluate(form, top_level)
        count += 1
    logger.debug("loaded %s: %d form(s)", resolved, count)
    return result


def load_prelude(itp: _HasEnv) -> None:
    """Load <prelude root>/core.lisp into the interpreter's environment."""
    core = get_prelude_root() / 'core.lisp'
    if not core.exists():
        raise FileNotFoundError(f"prelude not found: {core}")
    load_file(core, itp.env)
