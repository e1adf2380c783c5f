"""The interpreter: a global context with every built-in bound, and program execution."""

from __future__ import annotations

from enum import Enum
from typing import NoReturn, Optional

from lispet.core import BreakSignal, Context, FatalError, InterpreterNode, ReturnSignal
from lispet.forms import special_forms
from lispet.functions import builtin_functions


class Outcome(Enum):
    """How a program run ended."""

    OK = "ok"
    BREAK = "break"
    RETURN = "return"


def register_special_forms(context: Context) -> None:
    """Bind every special form and built-in function in the root layer of ``context``."""
    for form in (*special_forms(), *builtin_functions()):
        context.set_in_root(form.description, form)


class Interpreter:
    """Evaluation state for one source text."""

    def __init__(self, source: str = "") -> None:
        self.source = source
        self._context = Context()
        register_special_forms(self._context)

    def assert_verbose(
        self, node: Optional[InterpreterNode], condition: object, message: str
    ) -> None:
        """Abort evaluation with ``message`` against ``node`` unless ``condition`` holds."""
        if not condition:
            self.fail(message, node)

    def fail(self, message: str, node: Optional[InterpreterNode] = None) -> NoReturn:
        """Abort evaluation with ``message``, reported against ``node``."""
        raise FatalError(message, node)

    def get_context(self) -> Context:
        """The variable scopes of this interpreter."""
        return self._context

    def run(self, program: InterpreterNode) -> tuple[Outcome, Optional[InterpreterNode]]:
        """Evaluate ``program`` and report how it ended and with what value."""
        try:
            return Outcome.OK, program.evaluate(self, ())
        except ReturnSignal as signal:
            return Outcome.RETURN, signal.value
        except BreakSignal:
            return Outcome.BREAK, None