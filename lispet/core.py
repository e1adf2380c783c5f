"""Core runtime pieces: nodes, control-flow signals, scoped variables and a value stack."""

from __future__ import annotations

import io
import sys
from abc import ABC, abstractmethod
from collections import deque
from collections.abc import Iterable, Iterator, Sequence
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Optional, TextIO

from lispet.location import NodeLocation

if TYPE_CHECKING:
    from lispet.interpreter import Interpreter


class EvaluationError(Exception):
    """A recoverable evaluation problem, reported against the calling expression."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class FatalError(Exception):
    """An evaluation failure that aborts the whole run."""

    def __init__(self, message: str, node: Optional[InterpreterNode] = None) -> None:
        super().__init__(message)
        self.message = message
        self.node = node

    def __str__(self) -> str:
        return f"Condition failed: {self.message}"


class BreakSignal(Exception):
    """Raised by ``break`` to leave the innermost loop."""


class ReturnSignal(Exception):
    """Raised by ``return`` to leave the innermost function with a value."""

    def __init__(self, value: InterpreterNode) -> None:
        super().__init__("return")
        self.value = value


class InterpreterNode(ABC):
    """Anything the interpreter can evaluate and print."""

    def __init__(self, location: Optional[NodeLocation] = None) -> None:
        self.location = location

    @abstractmethod
    def evaluate(
        self, interpreter: Interpreter, args: Sequence[InterpreterNode] = ()
    ) -> InterpreterNode:
        """Evaluate this node, possibly applied to unevaluated ``args``."""

    @abstractmethod
    def print(self, out: TextIO, indent: int = 0) -> None:
        """Write a textual representation of this node to ``out``."""

    def to_string(self) -> str:
        """Return what :meth:`print` would write."""
        buffer = io.StringIO()
        self.print(buffer)
        return buffer.getvalue()

    def __str__(self) -> str:
        return self.to_string()


class CallableNode(InterpreterNode):
    """A node that may appear at the head of a called list."""

    def __init__(self) -> None:
        super().__init__(None)


class Context:
    """A stack of variable scopes; the innermost layer is searched first."""

    def __init__(self) -> None:
        self._root: dict[str, InterpreterNode] = {}
        self._layers: deque[dict[str, InterpreterNode]] = deque([self._root])

    def get(self, name: str) -> Optional[InterpreterNode]:
        """Look ``name`` up from the innermost layer outwards."""
        for layer in self._layers:
            if name in layer:
                return layer[name]
        return None

    def set(self, name: str, value: InterpreterNode) -> None:
        """Bind ``name`` in the innermost layer."""
        self._layers[0][name] = value

    def set_in_root(self, name: str, value: InterpreterNode) -> None:
        """Bind ``name`` in the outermost layer."""
        self._root[name] = value

    @contextmanager
    def create_layer(
        self, exceptions: Optional[Iterable[str]] = None
    ) -> Iterator[Context]:
        """Open a new innermost layer for the duration of the ``with`` block.

        Without ``exceptions`` every binding of the layer is dropped on exit.
        With ``exceptions`` the bindings whose names are not listed are carried
        over into the enclosing layer.
        """
        retained = None if exceptions is None else frozenset(exceptions)
        self._layers.appendleft({})
        try:
            yield self
        finally:
            self._pop_layer(retained)

    def _pop_layer(self, exceptions: Optional[frozenset[str]]) -> None:
        if len(self._layers) <= 1:
            raise RuntimeError("layers must be > 1")
        top = self._layers.popleft()
        if exceptions is not None:
            for name, value in top.items():
                if name not in exceptions:
                    self.set(name, value)

    def to_string(self) -> str:
        """Describe every layer, outermost first."""
        lines = []
        for number, layer in enumerate(reversed(self._layers)):
            lines.append(f"Layer {number}\n")
            lines.extend(f"    {name}: {value.to_string()}\n" for name, value in layer.items())
        return "".join(lines)

    def print(self, out: Optional[TextIO] = None) -> None:
        """Write :meth:`to_string` to ``out`` (standard output by default)."""
        (out if out is not None else sys.stdout).write(self.to_string())

    @property
    def depth(self) -> int:
        """Number of layers currently open, the root included."""
        return len(self._layers)


class InterpreterStack:
    """A last-in first-out stack of evaluated nodes."""

    def __init__(self) -> None:
        self._content: list[InterpreterNode] = []

    def push(self, value: InterpreterNode) -> None:
        """Put ``value`` on top of the stack."""
        self._content.append(value)

    def pop(self, interpreter: Any, node: Optional[InterpreterNode]) -> InterpreterNode:
        """Take the top value; an empty stack is reported against ``node``."""
        interpreter.assert_verbose(node, bool(self._content), "insufficent args")
        return self._content.pop()

    def pop_or_null(self) -> Optional[InterpreterNode]:
        """Take the top value, or return ``None`` when the stack is empty."""
        return self._content.pop() if self._content else None

    def is_empty(self) -> bool:
        """Whether the stack holds no values."""
        return not self._content

    def available(self) -> int:
        """Number of values on the stack."""
        return len(self._content)

    def __len__(self) -> int:
        return len(self._content)