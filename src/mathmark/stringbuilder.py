"""StringBuilder for O(n) HTML accumulation.

Appends fragments to a list and joins once at the end, instead of
concatenating strings at every node of the tree.

Thread Safety:
StringBuilder instances are local to each render() call.
No shared mutable state.

"""

from __future__ import annotations


class StringBuilder:
    """Fragment accumulator.

    Usage:
            >>> sb = StringBuilder()
            >>> sb.append("<u>").append("x").append("</u>")
            >>> sb.build()
            '<u>x</u>'

    """

    __slots__ = ("_parts",)

    def __init__(self) -> None:
        self._parts: list[str] = []

    def append(self, s: str) -> StringBuilder:
        """Append one fragment; empty strings are skipped.

        Returns:
            self for method chaining
        """
        if s:
            self._parts.append(s)
        return self

    def build(self) -> str:
        """Join every fragment into the final string."""
        return "".join(self._parts)
