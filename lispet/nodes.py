"""Syntax tree nodes: programs, lists, quotes, atoms, identifiers and literals."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from enum import Enum
from typing import TYPE_CHECKING, Optional, TextIO, Union

from lispet.core import CallableNode, EvaluationError, InterpreterNode
from lispet.location import NodeLocation

if TYPE_CHECKING:
    from lispet.interpreter import Interpreter


class ASTNode(InterpreterNode):
    """A node produced by parsing source text."""


class Element(ASTNode):
    """Something that can appear in a program or list: atom, literal, list or quote."""


class Identifier(ASTNode):
    """A bare name."""

    def __init__(self, location: Optional[NodeLocation], name: str) -> None:
        super().__init__(location)
        self.name = name

    def evaluate(
        self, interpreter: Interpreter, args: Sequence[InterpreterNode] = ()
    ) -> InterpreterNode:
        return self

    def print(self, out: TextIO, indent: int = 0) -> None:
        out.write(f"{' ' * indent}Identifier: {self.name}\n")


class Program(ASTNode):
    """A whole source file: a sequence of top-level elements."""

    def __init__(
        self,
        location: Optional[NodeLocation] = None,
        elements: Optional[Iterable[Element]] = None,
    ) -> None:
        super().__init__(location)
        self.elements: list[Element] = list(elements or ())

    def evaluate(
        self, interpreter: Interpreter, args: Sequence[InterpreterNode] = ()
    ) -> InterpreterNode:
        """Evaluate every element in order and return the last result."""
        result: InterpreterNode = null_node()
        for element in self.elements:
            result = element.evaluate(interpreter, ())
        return result

    def print(self, out: TextIO, indent: int = 0) -> None:
        out.write("Program:\n")
        for element in self.elements:
            out.write("  ")
            element.print(out)
            out.write("\n")


class List(Element):
    """A parenthesised list; evaluating a non-empty one calls its head."""

    def __init__(
        self,
        location: Optional[NodeLocation] = None,
        elements: Optional[Iterable[InterpreterNode]] = None,
    ) -> None:
        super().__init__(location)
        self.elements: list[InterpreterNode] = list(elements or ())

    def evaluate(
        self, interpreter: Interpreter, args: Sequence[InterpreterNode] = ()
    ) -> InterpreterNode:
        if not self.elements:
            return self
        head, *rest = self.elements
        interpreter.assert_verbose(
            head, isinstance(head, Atom), "first element of called list must be Atom"
        )
        name = head.identifier.name
        function = interpreter.get_context().get(name)
        interpreter.assert_verbose(
            head, function is not None, f"there is no function with name {name}"
        )
        interpreter.assert_verbose(
            head, isinstance(function, CallableNode), "attempt to call not-callable"
        )
        try:
            return function.evaluate(interpreter, rest)
        except EvaluationError as error:
            return interpreter.fail(error.message, self)

    def print(self, out: TextIO, indent: int = 0) -> None:
        out.write("(")
        for position, element in enumerate(self.elements):
            if position:
                out.write(" ")
            element.print(out, 0)
        out.write(")")


class Quote(Element):
    """A quoted node, which evaluates to the node itself unevaluated."""

    def __init__(self, location: Optional[NodeLocation], inner: InterpreterNode) -> None:
        super().__init__(location)
        self.inner = inner

    def evaluate(
        self, interpreter: Interpreter, args: Sequence[InterpreterNode] = ()
    ) -> InterpreterNode:
        return self.inner

    def print(self, out: TextIO, indent: int = 0) -> None:
        out.write(f"{' ' * indent}'")
        self.inner.print(out, indent)


class Atom(Element):
    """A name that evaluates to the value bound to it."""

    def __init__(self, location: Optional[NodeLocation], identifier: Identifier) -> None:
        super().__init__(location)
        self.identifier = identifier

    @property
    def name(self) -> str:
        """The identifier's name."""
        return self.identifier.name

    def evaluate(
        self, interpreter: Interpreter, args: Sequence[InterpreterNode] = ()
    ) -> InterpreterNode:
        value = interpreter.get_context().get(self.identifier.name)
        interpreter.assert_verbose(
            self, value is not None, f"there is no variable with name {self.identifier.name}"
        )
        return value

    def print(self, out: TextIO, indent: int = 0) -> None:
        out.write(self.identifier.name)


class LiteralType(Enum):
    """The kinds of literal value."""

    INTEGER = "INTEGER"
    REAL = "REAL"
    BOOLEAN = "BOOLEAN"
    NULLVAL = "NULLVAL"


LiteralValue = Union[int, float, bool, None]


class Literal(Element):
    """An integer, real, boolean or null constant."""

    def __init__(
        self,
        location: Optional[NodeLocation],
        type: LiteralType,
        value: LiteralValue = None,
    ) -> None:
        super().__init__(location)
        self.type = type
        self.value = value

    def type_name(self) -> str:
        """Name of this literal's kind."""
        return self.type.name

    def evaluate(
        self, interpreter: Interpreter, args: Sequence[InterpreterNode] = ()
    ) -> InterpreterNode:
        return self

    def print(self, out: TextIO, indent: int = 0) -> None:
        if self.type is LiteralType.INTEGER:
            out.write(str(self.value))
        elif self.type is LiteralType.REAL:
            out.write(f"{self.value:g}")
        elif self.type is LiteralType.BOOLEAN:
            out.write("true" if self.value else "false")
        else:
            out.write("null")

    def _number(self) -> Union[int, float]:
        if self.type is LiteralType.BOOLEAN:
            return 1 if self.value else 0
        return self.value  # type: ignore[return-value]

    def less(self, interpreter: Interpreter, other: Literal) -> bool:
        """Numeric ordering; booleans count as 0 and 1, null cannot be compared."""
        interpreter.assert_verbose(
            self, self.type is not LiteralType.NULLVAL, "Cannot compare NULL"
        )
        interpreter.assert_verbose(
            other, other.type is not LiteralType.NULLVAL, "Cannot compare NULL"
        )
        return self._number() < other._number()

    def eq(self, interpreter: Interpreter, other: Literal) -> bool:
        return not self.less(interpreter, other) and not other.less(interpreter, self)

    def neq(self, interpreter: Interpreter, other: Literal) -> bool:
        return not self.eq(interpreter, other)

    def lesseq(self, interpreter: Interpreter, other: Literal) -> bool:
        return self.less(interpreter, other) or self.eq(interpreter, other)

    def greater(self, interpreter: Interpreter, other: Literal) -> bool:
        return not self.less(interpreter, other) and not self.eq(interpreter, other)

    def greatereq(self, interpreter: Interpreter, other: Literal) -> bool:
        return self.greater(interpreter, other) or self.eq(interpreter, other)


def make_int(location: Optional[NodeLocation], value: int) -> Literal:
    """An integer literal."""
    return Literal(location, LiteralType.INTEGER, int(value))


def make_real(location: Optional[NodeLocation], value: float) -> Literal:
    """A real literal."""
    return Literal(location, LiteralType.REAL, float(value))


def make_bool(location: Optional[NodeLocation], value: bool) -> Literal:
    """A boolean literal."""
    return Literal(location, LiteralType.BOOLEAN, bool(value))


def make_nil(location: Optional[NodeLocation]) -> Literal:
    """A null literal."""
    return Literal(location, LiteralType.NULLVAL, None)


def null_node() -> Literal:
    """A fresh null literal with no location."""
    return make_nil(None)