"""Special forms: the built-ins that receive their arguments unevaluated."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Optional, TextIO, TypeVar

from lispet.core import (
    BreakSignal,
    CallableNode,
    EvaluationError,
    InterpreterNode,
    ReturnSignal,
)
from lispet.nodes import Atom, List, Literal, LiteralType, null_node

if TYPE_CHECKING:
    from lispet.interpreter import Interpreter

_N = TypeVar("_N", bound=InterpreterNode)


def expect_n_args(args: Sequence[InterpreterNode], n: int) -> Sequence[InterpreterNode]:
    """Return ``args`` unchanged, or raise if there are not exactly ``n`` of them."""
    if len(args) != n:
        raise EvaluationError(f"Expected {n} arguments but got {len(args)}")
    return args


def eval_node(interpreter: Interpreter, node: InterpreterNode) -> InterpreterNode:
    """Evaluate ``node`` with no arguments."""
    return node.evaluate(interpreter, ())


def eval_to_type(interpreter: Interpreter, node: InterpreterNode, cls: type[_N]) -> _N:
    """Evaluate ``node`` and require the result to be an instance of ``cls``."""
    raw = eval_node(interpreter, node)
    interpreter.assert_verbose(
        node,
        isinstance(raw, cls),
        f"Expected to be evaluated to {cls.__name__} but evaluated to {type(raw).__name__}",
    )
    return raw  # type: ignore[return-value]


def eval_to_bool(interpreter: Interpreter, node: InterpreterNode) -> bool:
    """Evaluate ``node`` and require a boolean literal; return its value."""
    literal = eval_to_type(interpreter, node, Literal)
    interpreter.assert_verbose(
        node,
        literal.type is LiteralType.BOOLEAN,
        f"{node.to_string()} expected to be evaluated to BOOLEAN "
        f"but evaluated to {literal.type_name()}",
    )
    return bool(literal.value)


def _force_cast(interpreter: Interpreter, node: InterpreterNode, cls: type[_N]) -> _N:
    interpreter.assert_verbose(
        node,
        isinstance(node, cls),
        f"Failed to cast {type(node).__name__} to {cls.__name__}",
    )
    return node  # type: ignore[return-value]


def _parameter_names(interpreter: Interpreter, node: InterpreterNode) -> list[str]:
    params = _force_cast(interpreter, node, List)
    return [_force_cast(interpreter, item, Atom).identifier.name for item in params.elements]


class SpecialForm(CallableNode):
    """A built-in callable, bound in the root scope under its description."""

    description = ""

    def print(self, out: TextIO, indent: int = 0) -> None:
        out.write(f"Special Form {self.description}")


class QuoteForm(SpecialForm):
    """``(quote x)``: return ``x`` unevaluated."""

    description = "quote"

    def evaluate(
        self, interpreter: Interpreter, args: Sequence[InterpreterNode] = ()
    ) -> InterpreterNode:
        return expect_n_args(args, 1)[0]


class SetqForm(SpecialForm):
    """``(setq name value)``: bind the evaluated value in the innermost scope."""

    description = "setq"

    def evaluate(
        self, interpreter: Interpreter, args: Sequence[InterpreterNode] = ()
    ) -> InterpreterNode:
        target, expression = expect_n_args(args, 2)
        atom = _force_cast(interpreter, target, Atom)
        value = eval_node(interpreter, expression)
        interpreter.get_context().set(atom.identifier.name, value)
        return null_node()


class LambdaValue(CallableNode):
    """A user-defined function: parameter names and an unevaluated body."""

    def __init__(self, arg_names: Sequence[str], body: InterpreterNode) -> None:
        super().__init__()
        self.arg_names = list(arg_names)
        self.body = body

    def evaluate(
        self, interpreter: Interpreter, args: Sequence[InterpreterNode] = ()
    ) -> InterpreterNode:
        expect_n_args(args, len(self.arg_names))
        evaluated = [eval_node(interpreter, arg) for arg in args]
        context = interpreter.get_context()
        with context.create_layer():
            for name, value in zip(self.arg_names, evaluated):
                context.set(name, value)
            try:
                return eval_node(interpreter, self.body)
            except ReturnSignal as signal:
                return signal.value

    def print(self, out: TextIO, indent: int = 0) -> None:
        out.write("LambdaValue ")
        for name in self.arg_names:
            out.write(f"({name}) ")
        self.body.print(out, indent)


class LambdaForm(SpecialForm):
    """``(lambda (params...) body)``: make an anonymous function."""

    description = "lambda"

    def evaluate(
        self, interpreter: Interpreter, args: Sequence[InterpreterNode] = ()
    ) -> InterpreterNode:
        params, body = expect_n_args(args, 2)
        return LambdaValue(_parameter_names(interpreter, params), body)


class FuncForm(SpecialForm):
    """``(func name (params...) body)``: define a named function."""

    description = "func"

    def evaluate(
        self, interpreter: Interpreter, args: Sequence[InterpreterNode] = ()
    ) -> InterpreterNode:
        target, params, body = expect_n_args(args, 3)
        atom = _force_cast(interpreter, target, Atom)
        names = _parameter_names(interpreter, params)
        interpreter.get_context().set(atom.identifier.name, LambdaValue(names, body))
        return null_node()


class CondForm(SpecialForm):
    """``(cond test then [else])``: evaluate one branch depending on ``test``."""

    description = "cond"

    def evaluate(
        self, interpreter: Interpreter, args: Sequence[InterpreterNode] = ()
    ) -> InterpreterNode:
        if len(args) < 2:
            raise EvaluationError(f"cond expects at least 2 args got {len(args)}")
        if len(args) > 3:
            raise EvaluationError(f"cond expects at most 3 args got {len(args)}")
        condition, true_branch = args[0], args[1]
        else_branch: Optional[InterpreterNode] = args[2] if len(args) == 3 else None
        if eval_to_bool(interpreter, condition):
            return eval_node(interpreter, true_branch)
        if else_branch is not None:
            return eval_node(interpreter, else_branch)
        return null_node()


class WhileForm(SpecialForm):
    """``(while test body)``: repeat ``body`` while ``test`` holds or until ``break``."""

    description = "while"

    def evaluate(
        self, interpreter: Interpreter, args: Sequence[InterpreterNode] = ()
    ) -> InterpreterNode:
        condition, body = expect_n_args(args, 2)
        while eval_to_bool(interpreter, condition):
            try:
                eval_node(interpreter, body)
            except BreakSignal:
                break
        return null_node()


class BreakForm(SpecialForm):
    """``(break)``: leave the innermost loop."""

    description = "break"

    def evaluate(
        self, interpreter: Interpreter, args: Sequence[InterpreterNode] = ()
    ) -> InterpreterNode:
        raise BreakSignal()


class ReturnForm(SpecialForm):
    """``(return value)``: leave the innermost function with ``value``."""

    description = "return"

    def evaluate(
        self, interpreter: Interpreter, args: Sequence[InterpreterNode] = ()
    ) -> InterpreterNode:
        (expression,) = expect_n_args(args, 1)
        raise ReturnSignal(eval_node(interpreter, expression))


class ProgForm(SpecialForm):
    """``(prog (locals...) (body...))``: run a block with its own local names.

    Names listed as locals vanish when the block ends; every other binding made
    in the block is kept in the enclosing scope.
    """

    description = "prog"

    def evaluate(
        self, interpreter: Interpreter, args: Sequence[InterpreterNode] = ()
    ) -> InterpreterNode:
        locals_node, body_node = expect_n_args(args, 2)
        local_names = _parameter_names(interpreter, locals_node)
        with interpreter.get_context().create_layer(local_names):
            interpreter.assert_verbose(
                body_node, isinstance(body_node, List), "Second argument of prog must be List"
            )
            result: InterpreterNode = null_node()
            for element in body_node.elements:  # type: ignore[union-attr]
                result = eval_node(interpreter, element)
            return result


def special_forms() -> list[SpecialForm]:
    """Fresh instances of every special form, in registration order."""
    return [
        QuoteForm(),
        SetqForm(),
        LambdaForm(),
        FuncForm(),
        CondForm(),
        WhileForm(),
        BreakForm(),
        ReturnForm(),
        ProgForm(),
    ]