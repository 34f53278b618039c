"""Source location tracking for diagnostics and debugging.

Thread Safety:
SourceLocation is frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """Source location for error messages and debugging.

    All positions are 1-indexed (lineno and col_offset start at 1).

    Attributes:
        lineno: Line number (1-indexed)
        col_offset: Column offset (1-indexed)
        source_file: Source file path (optional)

    Examples:
            >>> loc = SourceLocation(3, 7, "notes.mm")
            >>> str(loc)
            'notes.mm:3:7'

    """

    lineno: int
    col_offset: int
    source_file: str | None = None

    def __str__(self) -> str:
        """Format location for error messages.

        Returns:
            Formatted string like "file.mm:10:5" or "10:5"
        """
        if self.source_file:
            return f"{self.source_file}:{self.lineno}:{self.col_offset}"
        return f"{self.lineno}:{self.col_offset}"
