"""Indented line output for assembly text and code generation bookkeeping."""

from __future__ import annotations

from typing import TextIO


class CodeEmitter:
    """Writes assembly lines to a text stream with uniform indentation."""

    def __init__(self, output: TextIO, indent_spaces: int = 4) -> None:
        self._out = output
        self._indent_size = indent_spaces
        self._level = 0

    def emit(self, line: str) -> None:
        """Write one indented line followed by a newline."""
        self._out.write(" " * (self._level * self._indent_size) + line + "\n")

    def emit_raw(self, text: str) -> None:
        """Write ``text`` as is, without indentation or newline."""
        self._out.write(text)

    def newline(self) -> None:
        """Write a bare newline."""
        self._out.write("\n")

    def push(self) -> None:
        """Increase the indentation by one level."""
        self._level += 1

    def pop(self) -> None:
        """Decrease the indentation by one level, never below zero."""
        self._level = max(0, self._level - 1)

    def current_indent(self) -> int:
        """Return the current indentation level."""
        return self._level


class CodeGenContext:
    """Label and local-slot counters plus the stack of enclosing loops."""

    def __init__(self, class_name: str = "example") -> None:
        self.class_name = class_name
        self._next_label = 0
        self._next_local = 0
        self._loops: list[tuple[str, str]] = []

    def new_label(self) -> str:
        """Return a fresh label name: L0, L1, ..."""
        label = f"L{self._next_label}"
        self._next_label += 1
        return label

    def alloc_local(self) -> int:
        """Return the next local slot and advance the counter."""
        slot = self._next_local
        self._next_local += 1
        return slot

    def reset_local(self, n: int = 0) -> None:
        """Set the local slot counter to ``n``."""
        self._next_local = n

    def current_local(self) -> int:
        """Return the next local slot that would be allocated."""
        return self._next_local

    def push_loop(self, begin_label: str, exit_label: str) -> None:
        """Enter a loop whose start and exit are the given labels."""
        self._loops.append((begin_label, exit_label))

    def pop_loop(self) -> None:
        """Leave the innermost loop; IndexError if there is none."""
        self._loops.pop()

    def top_loop_begin(self) -> str:
        """Return the start label of the innermost loop."""
        return self._loops[-1][0]

    def top_loop_exit(self) -> str:
        """Return the exit label of the innermost loop."""
        return self._loops[-1][1]