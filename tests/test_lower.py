from __future__ import annotations

import pytest
from lark import Token, Tree

from tests.support.harness import (
    Call,
    EvalNameError,
    ExceptionCoalesce,
    Literal,
    MalformedTree,
    NullCoalesce,
    Raised,
    ShortTernary,
    Success,
    Ternary,
    VariableRef,
)
from coalesce_ref.evaluator import evaluate
from coalesce_ref.lower import lower


def num(text: str) -> Token:
    return Token("NUMBER", text)


def name(text: str, line: int | None = None, column: int | None = None) -> Token:
    return Token("NAME", text, line=line, column=column)


def op(text: str) -> Token:
    return Token("OP", text)


LOWERING_CASES = [
    pytest.param(Tree("literal", [num("42")]), Literal(42), id="int-literal"),
    pytest.param(Tree("literal", [num("2.5")]), Literal(2.5), id="float-literal"),
    pytest.param(Tree("literal", [Token("STRING", '"hi"')]), Literal("hi"), id="string-literal"),
    pytest.param(Tree("literal", [Token("STRING", "'hi'")]), Literal("hi"), id="single-quoted"),
    pytest.param(Tree("literal", [Token("TRUE", "true")]), Literal(True), id="true"),
    pytest.param(Tree("literal", [Token("FALSE", "false")]), Literal(False), id="false"),
    pytest.param(Tree("literal", [Token("NULL", "null")]), Literal(None), id="null"),
    pytest.param(Tree("var", [name("x")]), VariableRef("x"), id="var"),
    pytest.param(name("x"), VariableRef("x"), id="bare-name-root"),
    pytest.param(
        Tree("group", [op("("), Tree("var", [name("x")]), op(")")]),
        VariableRef("x"),
        id="group-with-parens",
    ),
    pytest.param(
        Tree("call", [name("f"), op("("), num("1"), op(","), name("y"), op(")")]),
        Call(VariableRef("f"), (Literal(1), VariableRef("y"))),
        id="call",
    ),
    pytest.param(
        Tree("call", [name("f")]),
        Call(VariableRef("f"), ()),
        id="call-no-args",
    ),
    pytest.param(
        Tree("catch_coalesce", [name("a"), op("???"), name("b"), op("???"), name("c")]),
        ExceptionCoalesce(VariableRef("a"), ExceptionCoalesce(VariableRef("b"), VariableRef("c"))),
        id="catch-chain-folds-right",
    ),
    pytest.param(
        Tree("catch_coalesce", [name("a"), name("b")]),
        ExceptionCoalesce(VariableRef("a"), VariableRef("b")),
        id="catch-without-op-tokens",
    ),
    pytest.param(
        Tree("nullish", [name("a"), op("??"), num("0")]),
        NullCoalesce(VariableRef("a"), Literal(0)),
        id="nullish",
    ),
    pytest.param(
        Tree("elvis", [name("a"), op("?:"), name("b"), op("?:"), num("1")]),
        ShortTernary(VariableRef("a"), ShortTernary(VariableRef("b"), Literal(1))),
        id="elvis-chain",
    ),
    pytest.param(
        Tree("ternary", [name("c"), op("?"), num("1"), op(":"), num("2")]),
        Ternary(VariableRef("c"), Literal(1), Literal(2)),
        id="ternary",
    ),
    pytest.param(
        Tree(
            "catch_coalesce",
            [
                name("a"),
                op("???"),
                Tree("group", [Tree("nullish", [name("b"), op("??"), name("c")])]),
            ],
        ),
        ExceptionCoalesce(VariableRef("a"), NullCoalesce(VariableRef("b"), VariableRef("c"))),
        id="catch-over-grouped-nullish",
    ),
    pytest.param(
        Tree(
            "catch_coalesce",
            [Tree("nullish", [name("a"), op("??"), name("b")]), op("???"), name("c")],
        ),
        ExceptionCoalesce(NullCoalesce(VariableRef("a"), VariableRef("b")), VariableRef("c")),
        id="nullish-under-catch",
    ),
]


@pytest.mark.parametrize("tree, expected", LOWERING_CASES)
def test_lowering_shapes(tree, expected) -> None:
    assert lower(tree) == expected


MALFORMED_CASES = [
    pytest.param(Tree("mystery", [name("x")]), id="unknown-rule"),
    pytest.param(Tree("ternary", [name("c"), num("1")]), id="ternary-arity"),
    pytest.param(Tree("catch_coalesce", [name("a")]), id="catch-single-operand"),
    pytest.param(Tree("nullish", [name("a"), op("???"), name("b")]), id="wrong-operator-token"),
    pytest.param(Tree("literal", [name("x")]), id="literal-holding-name"),
    pytest.param(Tree("literal", [num("0x1g")]), id="bad-number"),
    pytest.param(Tree("var", [num("1")]), id="var-holding-number"),
    pytest.param(Tree("group", [name("a"), name("b")]), id="group-two-exprs"),
    pytest.param(Tree("call", [op("("), op(")")]), id="call-without-callee"),
    pytest.param(Token("WEIRD", "?"), id="unknown-root-token"),
]


@pytest.mark.parametrize("tree", MALFORMED_CASES)
def test_lowering_rejects_malformed(tree) -> None:
    with pytest.raises(MalformedTree):
        lower(tree)


def test_lowered_tree_evaluates() -> None:
    tree = Tree(
        "nullish",
        [
            Tree("catch_coalesce", [Tree("call", [name("parse"), name("raw")]), op("???"), Token("NULL", "null")]),
            op("??"),
            Token("STRING", '"final"'),
        ],
    )
    node = lower(tree)

    assert evaluate(node, {"parse": int, "raw": "nope"}) == Success("final")
    assert evaluate(node, {"parse": int, "raw": "7"}) == Success(7)


def test_lowered_name_error_carries_location() -> None:
    node = lower(Tree("var", [name("ghost", line=3, column=7)]))

    outcome = evaluate(node)

    assert isinstance(outcome, Raised)
    assert isinstance(outcome.exception, EvalNameError)
    assert "(line 3, col 7)" in str(outcome.exception)


def test_malformed_location_from_token() -> None:
    with pytest.raises(MalformedTree) as excinfo:
        lower(Tree("literal", [Token("NUMBER", "1x", line=2, column=5)]))

    assert "line 2" in str(excinfo.value)
