# lispet

`lispet` is a small tree-walking interpreter for a Lisp-like language.
Programs are trees of lists, atoms, quotes and literals, built from the
classes in `lispet.nodes`. `lispet.interpreter.Interpreter` evaluates them
against a layered variable context whose root layer already holds a set of
special forms and built-in functions.

## The language

A non-empty list is a call: its first element must be an atom, which is
looked up in the context and must name something callable; the remaining
elements are handed to it unevaluated. An empty list evaluates to itself.
An atom evaluates to the value bound to its name. A quote yields its inner
element unevaluated. Literals are integers, reals, booleans and `null`.

Special forms (their arguments are not evaluated up front):

| Form     | Shape                              | Meaning                                              |
|----------|------------------------------------|------------------------------------------------------|
| `quote`  | `(quote x)`                        | `x`, unevaluated                                     |
| `setq`   | `(setq name expr)`                 | bind `name` in the innermost layer, yields `null`    |
| `lambda` | `(lambda (a b) body)`              | an anonymous function                                |
| `func`   | `(func name (a b) body)`           | bind a named function, yields `null`                 |
| `cond`   | `(cond test then [else])`          | conditional; `null` when false and no else branch    |
| `while`  | `(while test body)`                | loop until `test` is false or `break` is evaluated; yields `null` |
| `break`  | `(break)`                          | leave the innermost `while`                          |
| `return` | `(return expr)`                    | leave the innermost function with a value            |
| `prog`   | `(prog (locals...) (e1 e2 ...))`   | evaluate in a new layer and yield the last value; names in `locals` are dropped when it ends, other bindings move to the enclosing layer |

A function call evaluates its arguments, then evaluates the body in a new
layer with the parameters bound; the layer is dropped afterwards.

Built-in functions (arguments are evaluated first and type-checked):

* arithmetic: `plus`, `minus`, `times`, `divide` — the result is an
  integer when both operands are integers (division rounds towards zero)
  and a real otherwise; `mod` takes integers only and its result has the
  sign of the dividend
* lists: `head`, `tail`, `cons`, `length`
* comparison of literals: `equal`, `nonequal`, `less`, `lesseq`,
  `greater`, `greatereq` — booleans compare as 0 and 1, `null` cannot be
  compared
* predicates: `isint`, `isreal`, `isbool`, `isnull`, `isatom`, `islist`
* logic on booleans: `and`, `not`, and `or` — note that `or` is bound to
  exclusive or (`true` when exactly one operand is `true`)
* `eval`, which returns its evaluated argument, and `print`, which writes
  it and a newline to standard output and yields `null`

## Using it from Python

```python
from lispet.interpreter import Interpreter, Outcome
from lispet.nodes import Atom, Identifier, List, Program, make_int


def atom(name):
    return Atom(None, Identifier(None, name))


# (setq x 40) (plus x 2)
program = Program(None, [
    List(None, [atom("setq"), atom("x"), make_int(None, 40)]),
    List(None, [atom("plus"), atom("x"), make_int(None, 2)]),
])

interpreter = Interpreter("")
outcome, value = interpreter.run(program)
print(outcome is Outcome.OK, value)   # True 42
```

`Interpreter.run` returns a pair of an `Outcome` and a node:
`Outcome.OK` with the value of the last element, `Outcome.RETURN` with the
value carried by a top-level `return`, or `Outcome.BREAK` with `None` when
a `break` escaped to the top level.

Literals are made with `make_int`, `make_real`, `make_bool`, `make_nil`
and `null_node`. Every node has `print(out)` and `to_string()`.

`lispet.core.Context` is the layered scope: `get`, `set`, `set_in_root`,
and `create_layer(exceptions=None)`, a context manager that opens a new
innermost layer. `register_special_forms(context)` binds every built-in
into a context's root layer.

## Errors

Calling a form with the wrong number of arguments, using an unbound name,
calling something that is not callable, or giving an operator operands of
the wrong kind raises `lispet.core.FatalError`, which carries `message`
and the offending `node`. Integer division or `mod` by zero is reported
the same way.

When a node carries a `lispet.location.NodeLocation`,
`NodeLocation.format_line_error(source)` renders the affected source
lines with the region highlighted in terminal colours, and
`print_line_error(source, out)` writes that rendering. The interpreter
does not print this itself; callers decide what to do with the error.

## What it does not do

The package has no reader for source text: there is no lexer or parser,
so programs must be built as node trees in Python. It also has no
command-line program.

## Running the tests

Install the package with its `test` extra and run `pytest` from the
project directory.