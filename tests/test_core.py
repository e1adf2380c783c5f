import io

import pytest

from lispet.core import (
    BreakSignal,
    CallableNode,
    Context,
    EvaluationError,
    FatalError,
    InterpreterNode,
    InterpreterStack,
    ReturnSignal,
)
from lispet.location import NodeLocation


class _Value(InterpreterNode):
    def __init__(self, text, location=None):
        super().__init__(location)
        self.text = text

    def evaluate(self, interpreter, args=()):
        return self

    def print(self, out, indent=0):
        out.write(" " * indent + self.text)


class _Builtin(CallableNode):
    def evaluate(self, interpreter, args=()):
        return args[0]

    def print(self, out, indent=0):
        out.write("builtin")


class _StrictInterpreter:
    def assert_verbose(self, node, condition, message):
        if not condition:
            raise FatalError(message, node)


def test_to_string_matches_print():
    node = _Value("abc")
    buffer = io.StringIO()
    node.print(buffer)
    assert InterpreterNode.to_string(node) == buffer.getvalue() == "abc"
    assert str(node) == "abc"


def test_node_keeps_location():
    location = NodeLocation()
    assert _Value("x", location).location is location
    assert _Value("x").location is None


def test_callable_node_has_no_location_and_is_stored_in_root():
    builtin = _Builtin()
    context = Context()
    context.set_in_root("first", builtin)
    found = context.get("first")
    assert found is builtin
    assert found.location is None
    assert InterpreterNode.to_string(found) == "builtin"


def test_abstract_node_cannot_be_instantiated():
    with pytest.raises(TypeError):
        InterpreterNode()


def test_context_get_missing_is_none():
    assert Context().get("missing") is None


def test_context_set_and_get():
    context = Context()
    value = _Value("1")
    context.set("x", value)
    assert context.get("x") is value


def test_inner_layer_shadows_and_is_dropped():
    context = Context()
    outer, inner = _Value("outer"), _Value("inner")
    context.set("x", outer)
    with context.create_layer():
        context.set("x", inner)
        context.set("y", inner)
        assert context.get("x") is inner
        assert context.depth == 2
    assert context.get("x") is outer
    assert context.get("y") is None
    assert context.depth == 1


def test_layer_with_exceptions_retains_other_names():
    context = Context()
    kept, local = _Value("kept"), _Value("local")
    with context.create_layer({"tmp"}):
        context.set("result", kept)
        context.set("tmp", local)
    assert context.get("result") is kept
    assert context.get("tmp") is None


def test_empty_exceptions_retain_everything():
    context = Context()
    value = _Value("v")
    with context.create_layer([]):
        context.set("a", value)
    assert context.get("a") is value


def test_layer_is_popped_when_body_raises():
    context = Context()
    with pytest.raises(ReturnSignal):
        with context.create_layer():
            context.set("x", _Value("x"))
            raise ReturnSignal(_Value("r"))
    assert context.depth == 1
    assert context.get("x") is None


def test_set_in_root_visible_from_inner_layers():
    context = Context()
    root_value = _Value("root")
    with context.create_layer():
        context.set_in_root("plus", root_value)
        assert context.get("plus") is root_value
    assert context.get("plus") is root_value


def test_context_to_string_lists_layers_outermost_first():
    context = Context()
    context.set("a", _Value("1"))
    with context.create_layer():
        context.set("b", _Value("2"))
        text = context.to_string()
    assert text == "Layer 0\n    a: 1\nLayer 1\n    b: 2\n"


def test_context_print_writes_to_string():
    context = Context()
    context.set("a", _Value("1"))
    buffer = io.StringIO()
    context.print(buffer)
    assert buffer.getvalue() == context.to_string()


def test_stack_is_last_in_first_out():
    stack = InterpreterStack()
    first, second = _Value("1"), _Value("2")
    stack.push(first)
    stack.push(second)
    assert stack.available() == 2
    assert stack.pop(_StrictInterpreter(), None) is second
    assert stack.pop_or_null() is first
    assert stack.is_empty()


def test_stack_pop_or_null_on_empty():
    stack = InterpreterStack()
    assert stack.pop_or_null() is None
    assert stack.available() == 0


def test_stack_pop_empty_is_fatal():
    stack = InterpreterStack()
    node = _Value("n")
    with pytest.raises(FatalError) as info:
        stack.pop(_StrictInterpreter(), node)
    assert info.value.message == "insufficent args"
    assert info.value.node is node


def test_fatal_error_text():
    error = FatalError("boom")
    assert str(error) == "Condition failed: boom"
    assert error.node is None


def test_evaluation_error_message():
    error = EvaluationError("Expected 1 arguments but got 2")
    assert error.message == "Expected 1 arguments but got 2"
    assert str(error) == error.message


def test_return_signal_carries_value():
    value = _Value("v")
    with pytest.raises(ReturnSignal) as info:
        raise ReturnSignal(value)
    assert info.value.value is value


def test_break_signal_passes_return_handler_and_pops_layer():
    context = Context()
    caught = []
    with pytest.raises(BreakSignal):
        try:
            with context.create_layer():
                context.set("x", _Value("x"))
                raise BreakSignal()
        except ReturnSignal:
            caught.append("return")
    assert caught == []
    assert context.get("x") is None
    assert context.depth == 1