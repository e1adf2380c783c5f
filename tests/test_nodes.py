import pytest

from lispet.core import (
    BreakSignal,
    CallableNode,
    Context,
    EvaluationError,
    FatalError,
)
from lispet.nodes import (
    Atom,
    Identifier,
    List,
    Literal,
    LiteralType,
    Program,
    Quote,
    make_bool,
    make_int,
    make_nil,
    make_real,
    null_node,
)


class _Interp:
    def __init__(self):
        self.context = Context()

    def get_context(self):
        return self.context

    def assert_verbose(self, node, condition, message):
        if not condition:
            raise FatalError(message, node)

    def fail(self, message, node):
        raise FatalError(message, node)


class _Recorder(CallableNode):
    def __init__(self):
        super().__init__()
        self.calls = []

    def evaluate(self, interpreter, args=()):
        self.calls.append(list(args))
        return make_int(None, len(args))

    def print(self, out, indent=0):
        out.write("recorder")


class _Failing(CallableNode):
    def evaluate(self, interpreter, args=()):
        raise EvaluationError("bad call")

    def print(self, out, indent=0):
        out.write("failing")


class _Breaking(CallableNode):
    def evaluate(self, interpreter, args=()):
        raise BreakSignal()

    def print(self, out, indent=0):
        out.write("breaking")


def atom(name):
    return Atom(None, Identifier(None, name))


@pytest.fixture
def interp():
    return _Interp()


def test_literal_print_forms():
    assert make_int(None, 42).to_string() == "42"
    assert make_real(None, 2.5).to_string() == "2.5"
    assert make_bool(None, True).to_string() == "true"
    assert make_bool(None, False).to_string() == "false"
    assert make_nil(None).to_string() == "null"


def test_literal_type_names():
    assert make_int(None, 1).type_name() == "INTEGER"
    assert make_real(None, 1.0).type_name() == "REAL"
    assert make_bool(None, True).type_name() == "BOOLEAN"
    assert null_node().type_name() == "NULLVAL"
    assert null_node().type is LiteralType.NULLVAL


def test_literal_evaluates_to_itself(interp):
    lit = make_int(None, 7)
    assert lit.evaluate(interp, ()) is lit


def test_less_mixed_types(interp):
    one = make_int(None, 1)
    half = make_real(None, 0.5)
    true = make_bool(None, True)
    assert half.less(interp, one)
    assert not one.less(interp, half)
    assert not true.less(interp, one)
    assert make_bool(None, False).less(interp, true)


def test_equality_across_types(interp):
    assert make_int(None, 2).eq(interp, make_real(None, 2.0))
    assert make_bool(None, True).eq(interp, make_int(None, 1))
    assert make_int(None, 2).neq(interp, make_int(None, 3))


def test_ordering_relations_consistent(interp):
    values = [make_int(None, 1), make_real(None, 1.5), make_int(None, 3), make_bool(None, False)]
    for a in values:
        for b in values:
            assert a.lesseq(interp, b) == (a.less(interp, b) or a.eq(interp, b))
            assert a.greater(interp, b) == b.less(interp, a)
            assert a.greatereq(interp, b) == (not a.less(interp, b))


def test_compare_null_raises(interp):
    with pytest.raises(FatalError) as info:
        null_node().less(interp, make_int(None, 1))
    assert info.value.message == "Cannot compare NULL"
    with pytest.raises(FatalError):
        make_int(None, 1).eq(interp, make_nil(None))


def test_identifier_evaluates_and_prints(interp):
    ident = Identifier(None, "foo")
    assert ident.evaluate(interp, ()) is ident
    assert ident.to_string() == "Identifier: foo\n"


def test_atom_lookup(interp):
    value = make_int(None, 5)
    interp.context.set("x", value)
    assert atom("x").evaluate(interp, ()) is value
    assert atom("x").to_string() == "x"


def test_atom_missing_variable(interp):
    node = atom("missing")
    with pytest.raises(FatalError) as info:
        node.evaluate(interp, ())
    assert info.value.message == "there is no variable with name missing"
    assert info.value.node is node


def test_quote_returns_inner_unevaluated(interp):
    inner = List(None, [atom("a"), atom("b")])
    quote = Quote(None, inner)
    assert quote.evaluate(interp, ()) is inner
    assert quote.to_string() == "'(a b)"


def test_list_print_nested():
    node = List(None, [atom("f"), make_int(None, 1), List(None, [atom("g")])])
    assert node.to_string() == "(f 1 (g))"
    assert List(None, []).to_string() == "()"


def test_empty_list_evaluates_to_itself(interp):
    node = List(None, [])
    assert node.evaluate(interp, ()) is node


def test_list_call_passes_unevaluated_args(interp):
    rec = _Recorder()
    interp.context.set("f", rec)
    arg1 = atom("unbound")
    arg2 = make_int(None, 3)
    result = List(None, [atom("f"), arg1, arg2]).evaluate(interp, ())
    assert result.value == 2
    assert rec.calls == [[arg1, arg2]]


def test_list_head_must_be_atom(interp):
    with pytest.raises(FatalError) as info:
        List(None, [make_int(None, 1)]).evaluate(interp, ())
    assert info.value.message == "first element of called list must be Atom"


def test_list_unknown_function(interp):
    with pytest.raises(FatalError) as info:
        List(None, [atom("nope")]).evaluate(interp, ())
    assert info.value.message == "there is no function with name nope"


def test_list_not_callable(interp):
    interp.context.set("x", make_int(None, 1))
    with pytest.raises(FatalError) as info:
        List(None, [atom("x")]).evaluate(interp, ())
    assert info.value.message == "attempt to call not-callable"


def test_list_converts_evaluation_error(interp):
    interp.context.set("bad", _Failing())
    node = List(None, [atom("bad")])
    with pytest.raises(FatalError) as info:
        node.evaluate(interp, ())
    assert info.value.message == "bad call"
    assert info.value.node is node


def test_program_returns_last_result(interp):
    interp.context.set("y", make_bool(None, True))
    last = atom("y")
    program = Program(None, [make_int(None, 1), last])
    assert program.evaluate(interp, ()) is interp.context.get("y")


def test_empty_program_returns_null(interp):
    result = Program(None, []).evaluate(interp, ())
    assert result.type is LiteralType.NULLVAL


def test_program_propagates_signals(interp):
    interp.context.set("stop", _Breaking())
    program = Program(None, [List(None, [atom("stop")]), make_int(None, 1)])
    with pytest.raises(BreakSignal):
        program.evaluate(interp, ())


def test_program_print():
    program = Program(None, [make_int(None, 1), atom("x")])
    assert program.to_string() == "Program:\n  1\n  x\n"


def test_literal_direct_construction():
    lit = Literal(None, LiteralType.REAL, 0.25)
    assert lit.value == 0.25
    assert lit.type_name() == "REAL"