"""Source positions and ranges, with terminal rendering of error locations."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, replace
from typing import Optional, TextIO

_RED = "\x1b[38;2;255;000;000m"
_BOLD_WHITE = "\x1b[1m\x1b[38;2;255;255;255m"
_RESET = "\x1b[0m"


def _clamped_add(lhs: int, rhs: int, minimum: int) -> int:
    return max(minimum, lhs + rhs)


@dataclass
class Position:
    """A point in a source file: optional file name, 1-based line and column."""

    filename: Optional[str] = None
    line: int = 1
    column: int = 1

    def lines(self, count: int = 1) -> None:
        """Advance by ``count`` lines, resetting the column."""
        if count:
            self.column = 1
            self.line = _clamped_add(self.line, count, 1)

    def columns(self, count: int = 1) -> None:
        """Advance by ``count`` columns, never going below column 1."""
        self.column = _clamped_add(self.column, count, 1)

    def __add__(self, width: int) -> Position:
        result = replace(self)
        result.columns(width)
        return result

    def __sub__(self, width: int) -> Position:
        return self + (-width)

    def __str__(self) -> str:
        prefix = f"{self.filename}:" if self.filename else ""
        return f"{prefix}{self.line}.{self.column}"


@dataclass
class Location:
    """A range between two positions in a source file."""

    begin: Position = field(default_factory=Position)
    end: Position = field(default_factory=Position)

    def step(self) -> None:
        """Move the beginning of the range to its end."""
        self.begin = replace(self.end)

    def columns(self, count: int = 1) -> None:
        """Extend the range by ``count`` columns."""
        self.end.columns(count)

    def lines(self, count: int = 1) -> None:
        """Extend the range by ``count`` lines."""
        self.end.lines(count)

    def _copy(self) -> Location:
        return replace(self, begin=replace(self.begin), end=replace(self.end))

    def __add__(self, other: Location | int) -> Location:
        result = self._copy()
        if isinstance(other, Location):
            result.end = replace(other.end)
        else:
            result.columns(other)
        return result

    def __sub__(self, width: int) -> Location:
        return self + (-width)

    def __str__(self) -> str:
        end_col = self.end.column - 1 if self.end.column > 0 else 0
        text = str(self.begin)
        if self.end.filename and (
            not self.begin.filename or self.begin.filename != self.end.filename
        ):
            text += f"-{self.end.filename}:{self.end.line}.{end_col}"
        elif self.begin.line < self.end.line:
            text += f"-{self.end.line}.{end_col}"
        elif self.begin.column < end_col:
            text += f"-{end_col}"
        return text


@dataclass
class NodeLocation(Location):
    """A location that also tracks character offsets into the source text."""

    char_offset_begin: int = 0
    char_offset_end: int = 0

    def columns(self, count: int = 1) -> None:
        super().columns(count)
        self.char_offset_end += count

    def step(self) -> None:
        super().step()
        self.char_offset_begin = self.char_offset_end

    def format_line_error(self, source: str) -> str:
        """Render the source lines of this location, highlighting its text."""
        numbers = [str(n) for n in range(self.begin.line, self.end.line + 1)]
        width = max((len(n) for n in numbers), default=0)

        def line_prefix(index: int) -> str:
            number = numbers[index] if index < len(numbers) else str(self.begin.line + index)
            return number.ljust(width) + ": "

        left = self.char_offset_begin + 1 - self.begin.column
        right = self.char_offset_end
        while right < len(source) and source[right] != "\n":
            right += 1
        if right > left and right < len(source) and source[right] == "\n":
            right -= 1
        right = min(right, len(source) - 1)
        left = max(left, 0)

        parts = [line_prefix(0)]
        current_line = 0
        current_length = 0
        min_left = 999999
        max_right = 0
        for offset, char in enumerate(source[left : right + 1], start=left):
            if self.char_offset_begin <= offset < self.char_offset_end:
                parts.append(f"{_RED}{char}{_RESET}")
            else:
                parts.append(char)
            if char == "\n":
                current_line += 1
                parts.append(line_prefix(current_line))
                current_length = 0
                continue
            current_length += 1
            if char not in " \t":
                min_left = min(min_left, current_length)
                max_right = max(max_right, current_length)

        parts.append("\n")
        if self.begin.line != self.end.line:
            parts.append(" " * (min_left + 3))
            marks = "~" * max(max_right - min_left + 1, 0)
        else:
            parts.append(" " * (self.begin.column + 2))
            marks = "~" * max(self.end.column - self.begin.column, 0)
        parts.append(f"{_BOLD_WHITE}{marks}{_RESET}")
        parts.append("\n")
        return "".join(parts)

    def print_line_error(self, source: str, out: Optional[TextIO] = None) -> None:
        """Write the rendering of :meth:`format_line_error` to ``out``."""
        (out if out is not None else sys.stdout).write(self.format_line_error(source))