"""Runtime environment for Sloth.

The Environment stores bindings of Symbols to evaluated Lisp values and supports
nested scopes via an `outer` link. Closures hold a reference to the frame they
were created in, so a frame lives as long as the longest-lived closure that
captured it.
"""

from __future__ import annotations

from io import StringIO
from typing import Optional

from sloth import LispValue
from sloth.types.errors import LispError, MALFORMED_FORM, UNBOUND_SYMBOL
from sloth.types.symbol import Symbol


class Environment:
    """Hierarchical mapping from Symbols to Lisp values."""

    __slots__ = ("vars", "outer")

    def __init__(self, outer: Optional[Environment] = None):
        # Runtime environment stores evaluated LispValue(s)
        self.vars: dict[Symbol, LispValue] = {}
        self.outer: Environment | None = outer

    def define(self, name: Symbol, value: LispValue) -> None:
        """Bind `name` to `value` in this frame, replacing any existing binding.

        Raises malformed-form if `name` is not a Symbol.
        """
        if not isinstance(name, Symbol):
            raise LispError(MALFORMED_FORM, f"Cannot define {name!r} as a symbol")
        self.vars[name] = value

    def find(self, symbol: Symbol) -> Optional[Environment]:
        """Find the nearest environment in the chain that contains `symbol`."""
        env: Optional[Environment] = self
        while env is not None:
            if symbol in env.vars:
                return env
            env = env.outer
        return None

    def set(self, name: Symbol, value: LispValue) -> LispValue:
        """Update an existing binding in the frame that owns it.

        Returns the previous value. Raises unbound-symbol if `name` is not bound.
        """
        env = self.find(name)
        if env is None:
            raise LispError(UNBOUND_SYMBOL, f"cannot set! unbound symbol {name}")
        old = env.vars[name]
        env.vars[name] = value
        return old

    def lookup(self, name: Symbol) -> LispValue:
        """Look up the value bound to `name`, walking outward.

        Raises unbound-symbol if not found.
        """
        env: Optional[Environment] = self
        while env is not None:
            try:
                return env.vars[name]
            except KeyError:
                env = env.outer
        raise LispError(UNBOUND_SYMBOL, f"symbol '{name} is not bound")

    def is_bound(self, name: Symbol) -> bool:
        return self.find(name) is not None

    def top_level(self) -> Environment:
        """The outermost (global) frame of this chain."""
        env = self
        while env.outer is not None:
            env = env.outer
        return env

    def update(self, mapping: dict[Symbol, LispValue]) -> None:
        """Bulk-define a mapping of Symbol -> value in the current frame."""
        for k, v in mapping.items():
            self.define(k, v)

    def snapshot(self) -> list[tuple[Symbol, LispValue]]:
        """A copy of this frame's bindings, safe to iterate while it is mutated."""
        return list(self.vars.items())

    def _write_vars(self, buffer: StringIO) -> None:
        """Write this frame's variables into the buffer in a compact form."""
        buffer.write("{")
        buffer.write(", ".join(f"{k}: {v!r}" for k, v in self.snapshot()))
        buffer.write("}")

    def __str__(self) -> str:
        """Human-readable single-frame view with an indicator for parent."""
        with StringIO() as buffer:
            self._write_vars(buffer)
            if self.outer is not None:
                buffer.write(" -> ...")  # indicate parent exists
            return buffer.getvalue()

    def __repr__(self) -> str:
        """Frame-by-frame summary of the chain, innermost first."""
        depth = 0
        env = self
        while env.outer is not None:
            depth += 1
            env = env.outer
        return f"<Environment {len(self.vars)} bindings, depth {depth}>"
