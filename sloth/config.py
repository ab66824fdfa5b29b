from __future__ import annotations
import os
from pathlib import Path
from typing import Iterable, List


# Resolve installation dir (sloth package directory)
_SLOTH_DIR = Path(__file__).resolve().parent

# Defaults
_DEFAULT_PRELUDE_DIR = _SLOTH_DIR / 'prelude'
_DEFAULT_TRACEBACK_LIMIT = 64
_DEFAULT_RECURSION_LIMIT = 10_000
_DEFAULT_LOG_LEVEL = 'WARNING'


def paths_from_env(var: str, defaults: Iterable[Path]) -> List[Path]:
    raw = os.environ.get(var)
    if not raw:
        return [Path(p) for p in defaults]
    return [Path(p.strip()) for p in raw.split(os.pathsep) if p.strip()]


def int_from_env(var: str, default: int) -> int:
    raw = os.environ.get(var, '').strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{var} must be an integer, got {raw!r}") from None


def get_prelude_root() -> Path:
    roots = paths_from_env('SLOTH_PRELUDE_PATH', [_DEFAULT_PRELUDE_DIR])
    # treat as single directory; if a file path is set, return its parent
    p = roots[0]
    return p if p.is_dir() else p.parent


def get_load_path() -> List[Path]:
    """Directories searched by load-file for relative paths, after the cwd."""
    return paths_from_env('SLOTH_PATH', [])


def get_traceback_limit() -> int:
    return int_from_env('SLOTH_TRACEBACK_LIMIT', _DEFAULT_TRACEBACK_LIMIT)


def get_recursion_limit() -> int:
    return int_from_env('SLOTH_RECURSION_LIMIT', _DEFAULT_RECURSION_LIMIT)


def get_log_level() -> str:
    return os.environ.get('SLOTH_LOG_LEVEL', _DEFAULT_LOG_LEVEL).upper()
