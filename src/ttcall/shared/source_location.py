"""
Source Location (Span)

Rust Pattern: proc_macro::Span
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class SourceLocation:
    """
    Source location of a single token (Rust Span pattern).

    - file, 1-based line and column of the first character
    - start/end are character offsets into the source text
    - end_line/end_column point one past the last character
    - Immutable (frozen) so tokens stay hashable
    """
    file: str
    line: int
    column: int
    start: int = 0
    end: int = 0
    end_line: int = 0
    end_column: int = 0

    def __str__(self) -> str:
        """Format as file:line:column (Rust pattern)"""
        return f"{self.file}:{self.line}:{self.column}"

    def split_at(self, width: int) -> "tuple[SourceLocation, SourceLocation]":
        """Split a single-line span after `width` characters."""
        head = SourceLocation(
            file=self.file,
            line=self.line,
            column=self.column,
            start=self.start,
            end=self.start + width,
            end_line=self.line,
            end_column=self.column + width,
        )
        tail = SourceLocation(
            file=self.file,
            line=self.line,
            column=self.column + width,
            start=self.start + width,
            end=self.end,
            end_line=self.end_line or self.line,
            end_column=self.end_column,
        )
        return head, tail
