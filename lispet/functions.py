"""Built-in functions: callables whose arguments are evaluated and type-checked first."""

from __future__ import annotations

import math
import operator
import sys
from abc import abstractmethod
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, ClassVar, Optional, TextIO, Union

from lispet.core import EvaluationError, InterpreterNode
from lispet.forms import SpecialForm, eval_to_type, expect_n_args
from lispet.nodes import (
    Atom,
    List,
    Literal,
    LiteralType,
    make_bool,
    make_int,
    make_real,
    null_node,
)

if TYPE_CHECKING:
    from lispet.interpreter import Interpreter

Number = Union[int, float]


def _trunc_div(a: int, b: int) -> int:
    """Integer division rounding towards zero."""
    if b == 0:
        raise EvaluationError("division by zero")
    quotient = abs(a) // abs(b)
    return quotient if (a < 0) == (b < 0) else -quotient


def _divide(a: Number, b: Number) -> Number:
    if isinstance(a, int) and isinstance(b, int):
        return _trunc_div(a, b)
    try:
        return a / b
    except ZeroDivisionError:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)


class SimpleFunction(SpecialForm):
    """A built-in that evaluates each argument and checks it against ``arg_types``."""

    arg_types: ClassVar[tuple[type[InterpreterNode], ...]] = ()

    def evaluate(
        self, interpreter: Interpreter, args: Sequence[InterpreterNode] = ()
    ) -> InterpreterNode:
        expect_n_args(args, len(self.arg_types))
        values = [
            eval_to_type(interpreter, arg, cls) for arg, cls in zip(args, self.arg_types)
        ]
        return self.run(interpreter, *values)

    @abstractmethod
    def run(self, interpreter: Interpreter, *args: InterpreterNode) -> InterpreterNode:
        """Compute the result from already evaluated arguments."""


class BinaryMathFunction(SimpleFunction):
    """Arithmetic on two numbers; the result is real if either operand is real."""

    arg_types = (Literal, Literal)

    def __init__(self, name: str, func: Callable[[Number, Number], Number]) -> None:
        super().__init__()
        self.description = name
        self.func = func

    def run(self, interpreter: Interpreter, a: Literal, b: Literal) -> InterpreterNode:
        interpreter.assert_verbose(
            a, a.type is not LiteralType.BOOLEAN, "first operand must be digital"
        )
        interpreter.assert_verbose(
            a, a.type is not LiteralType.NULLVAL, "first operand must be digital"
        )
        interpreter.assert_verbose(
            b, b.type is not LiteralType.BOOLEAN, "second operand must be digital"
        )
        interpreter.assert_verbose(
            b, b.type is not LiteralType.NULLVAL, "second operand must be digital"
        )
        result = self.func(a.value, b.value)  # type: ignore[arg-type]
        if a.type is LiteralType.INTEGER and b.type is LiteralType.INTEGER:
            return make_int(None, result)  # type: ignore[arg-type]
        return make_real(None, result)


class ModFunction(SimpleFunction):
    """Integer remainder; its sign follows the dividend."""

    description = "mod"
    arg_types = (Literal, Literal)

    def run(self, interpreter: Interpreter, a: Literal, b: Literal) -> InterpreterNode:
        interpreter.assert_verbose(a, a.type is LiteralType.INTEGER, "first operand must be int")
        interpreter.assert_verbose(b, b.type is LiteralType.INTEGER, "second operand must be int")
        dividend, divisor = int(a.value), int(b.value)  # type: ignore[arg-type]
        return make_int(None, dividend - divisor * _trunc_div(dividend, divisor))


class HeadFunction(SimpleFunction):
    """First element of a list."""

    description = "head"
    arg_types = (List,)

    def run(self, interpreter: Interpreter, lst: List) -> InterpreterNode:
        if not lst.elements:
            raise EvaluationError("list must not be empty")
        return lst.elements[0]


class TailFunction(SimpleFunction):
    """All elements of a list but the first."""

    description = "tail"
    arg_types = (List,)

    def run(self, interpreter: Interpreter, lst: List) -> InterpreterNode:
        interpreter.assert_verbose(lst, bool(lst.elements), "list must not be empty")
        return List(None, lst.elements[1:])


class ConsFunction(SimpleFunction):
    """A new list with a value put in front of a list."""

    description = "cons"
    arg_types = (InterpreterNode, List)

    def run(self, interpreter: Interpreter, value: InterpreterNode, lst: List) -> InterpreterNode:
        return List(None, [value, *lst.elements])


class LengthFunction(SimpleFunction):
    """Number of elements in a list."""

    description = "length"
    arg_types = (List,)

    def run(self, interpreter: Interpreter, lst: List) -> InterpreterNode:
        return make_int(None, len(lst.elements))


class LiteralComparison(SimpleFunction):
    """A boolean comparison between two literals."""

    arg_types = (Literal, Literal)

    def __init__(
        self, name: str, compare: Callable[[Interpreter, Literal, Literal], bool]
    ) -> None:
        super().__init__()
        self.description = name
        self.compare = compare

    def run(self, interpreter: Interpreter, a: Literal, b: Literal) -> InterpreterNode:
        return make_bool(None, self.compare(interpreter, a, b))


class ElementPredicate(SimpleFunction):
    """A boolean test on any evaluated value."""

    arg_types = (InterpreterNode,)

    def __init__(self, name: str, predicate: Callable[[InterpreterNode], bool]) -> None:
        super().__init__()
        self.description = name
        self.predicate = predicate

    def run(self, interpreter: Interpreter, element: InterpreterNode) -> InterpreterNode:
        return make_bool(None, self.predicate(element))


class BoolBinaryFunction(SimpleFunction):
    """A logical operation on two booleans."""

    arg_types = (Literal, Literal)

    def __init__(self, name: str, func: Callable[[bool, bool], bool]) -> None:
        super().__init__()
        self.description = name
        self.func = func

    def run(self, interpreter: Interpreter, a: Literal, b: Literal) -> InterpreterNode:
        interpreter.assert_verbose(
            a, a.type is LiteralType.BOOLEAN, f"first operand of {self.description} must be bool"
        )
        interpreter.assert_verbose(
            b, b.type is LiteralType.BOOLEAN, f"second operand of {self.description} must be bool"
        )
        return make_bool(None, self.func(bool(a.value), bool(b.value)))


class NotFunction(SimpleFunction):
    """Logical negation."""

    description = "not"
    arg_types = (Literal,)

    def run(self, interpreter: Interpreter, a: Literal) -> InterpreterNode:
        interpreter.assert_verbose(
            a, a.type is LiteralType.BOOLEAN, f"operand of {self.description} must be bool"
        )
        return make_bool(None, not a.value)


class EvalFunction(SimpleFunction):
    """Return the evaluated argument."""

    description = "eval"
    arg_types = (InterpreterNode,)

    def run(self, interpreter: Interpreter, a: InterpreterNode) -> InterpreterNode:
        return a


class PrintFunction(SimpleFunction):
    """Write the evaluated argument and a newline; standard output by default."""

    description = "print"
    arg_types = (InterpreterNode,)

    def __init__(self, out: Optional[TextIO] = None) -> None:
        super().__init__()
        self.out = out

    def run(self, interpreter: Interpreter, a: InterpreterNode) -> InterpreterNode:
        out = self.out if self.out is not None else sys.stdout
        a.print(out)
        out.write("\n")
        return null_node()


def _comparison(
    name: str, method: Callable[[Literal, Interpreter, Literal], bool]
) -> LiteralComparison:
    return LiteralComparison(name, lambda interpreter, a, b: method(a, interpreter, b))


def _literal_of(kind: LiteralType) -> Callable[[InterpreterNode], bool]:
    return lambda node: isinstance(node, Literal) and node.type is kind


def builtin_functions() -> list[SimpleFunction]:
    """Fresh instances of every built-in function, in registration order."""
    return [
        BinaryMathFunction("plus", operator.add),
        BinaryMathFunction("minus", operator.sub),
        BinaryMathFunction("times", operator.mul),
        BinaryMathFunction("divide", _divide),
        ModFunction(),
        HeadFunction(),
        TailFunction(),
        ConsFunction(),
        LengthFunction(),
        _comparison("equal", Literal.eq),
        _comparison("nonequal", Literal.neq),
        _comparison("less", Literal.less),
        _comparison("lesseq", Literal.lesseq),
        _comparison("greater", Literal.greater),
        _comparison("greatereq", Literal.greatereq),
        ElementPredicate("isint", _literal_of(LiteralType.INTEGER)),
        ElementPredicate("isreal", _literal_of(LiteralType.REAL)),
        ElementPredicate("isbool", _literal_of(LiteralType.BOOLEAN)),
        ElementPredicate("isnull", _literal_of(LiteralType.NULLVAL)),
        ElementPredicate("isatom", lambda node: isinstance(node, Atom)),
        ElementPredicate("islist", lambda node: isinstance(node, List)),
        BoolBinaryFunction("and", lambda a, b: a and b),
        BoolBinaryFunction("or", lambda a, b: a or b),
        # Exclusive or is registered under "or" as well; being later, it wins.
        BoolBinaryFunction("or", operator.ne),
        NotFunction(),
        EvalFunction(),
        PrintFunction(),
    ]