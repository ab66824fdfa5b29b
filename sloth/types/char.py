from __future__ import annotations


class Char:
    """A character literal, kept distinct from one-element strings."""

    __slots__ = ("ch",)

    def __init__(self, ch: str):
        if len(ch) != 1:
            raise ValueError(f"Char expects a single character, got {ch!r}")
        self.ch = ch

    def __eq__(self, other) -> bool:
        return isinstance(other, Char) and self.ch == other.ch

    def __hash__(self) -> int:
        return hash(("char", self.ch))

    def __repr__(self):
        return f"Char({self.ch!r})"

    def __str__(self):
        return self.ch
