"""Traceback rendering for error values.

For an error and each error it was raised from, the dump reads:

    kind: value
    \tfrom <source form>
    \tin <form> [procedure]
    ...
"""

from __future__ import annotations

import sys
from typing import TextIO

from sloth.debug_utils.pprint import to_display, to_repr
from sloth.types.errors import LispError

MAX_FORM_WIDTH = 72


def _clip(text: str, width: int = MAX_FORM_WIDTH) -> str:
    return text if len(text) <= width else text[: width - 3] + "..."


def format_traceback(err: LispError) -> str:
    lines = []
    for i, e in enumerate(err.chain()):
        if i:
            lines.append("caused by:")
        lines.append(f"{e.kind}: {to_display(e.value)}")
        if e.source is not None:
            lines.append(f"\tfrom {_clip(to_repr(e.source))}")
        for frame in e.trace:
            where = f"\tin {_clip(to_repr(frame.form))}"
            if frame.name:
                where += f" [{frame.name}]"
            lines.append(where)
        if e.elided:
            lines.append(f"\t... {e.elided} more frame(s)")
    return "\n".join(lines)


def dump_traceback(err: LispError, stream: TextIO | None = None) -> None:
    """Write the rendered traceback of `err` to `stream` (stdout by default)."""
    print(format_traceback(err), file=stream or sys.stdout)
