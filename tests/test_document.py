from __future__ import annotations

import pytest

from quarry.document import (
    Directive,
    DocumentCache,
    FieldNode,
    InlineFragment,
    Variable,
    VariableDefinition,
    parse,
)
from quarry.errors import DocumentError


def test_aliases_and_arguments() -> None:
    op = parse('{ a: item(barcode: "123") { title } }').operation()

    (node,) = op.selections
    assert op.kind == "query"
    assert node.name == "item"
    assert node.response_key == "a"
    assert node.arguments == {"barcode": "123"}
    assert node.selections == (FieldNode("title"),)


def test_scalar_selection_has_no_subselections() -> None:
    (node,) = parse("{ hello }").operation().selections
    assert node.selections is None


def test_literal_values() -> None:
    (node,) = parse('{ f(a: 1, b: 1.5, c: "s", d: true, e: null, f: [1, 2], g: {x: RED}) }').operation().selections
    assert node.arguments == {
        "a": 1,
        "b": 1.5,
        "c": "s",
        "d": True,
        "e": None,
        "f": [1, 2],
        "g": {"x": "RED"},
    }


def test_variables() -> None:
    op = parse('query Q($b: String! = "1", $n: Int) { item(barcode: $b) { title } }').operation("Q")

    assert op.variables[0] == VariableDefinition("b", "String!", "1")
    assert op.variables[1].type == "Int"
    assert op.selections[0].arguments == {"barcode": Variable("b")}
    assert op.variable_values(None) == {"b": "1"}
    assert op.variable_values({"b": "2", "n": 3}) == {"b": "2", "n": 3}


def test_named_fragments_expand_inline() -> None:
    op = parse("query { items { ...F } } fragment F on Item { barcode }").operation()

    (items,) = op.selections
    assert items.selections == (InlineFragment("Item", (FieldNode("barcode"),)),)


def test_directives() -> None:
    (node,) = parse("{ items @skip(if: true) { barcode } }").operation().selections
    assert node.directives == (Directive("skip", {"if": True}),)


def test_mutation_kind() -> None:
    assert parse('mutation { createItem(item: {barcode: "1"}) { itemId } }').operation().kind == "mutation"


@pytest.mark.parametrize(
    "text",
    [
        "{ items {",
        "subscription { items { barcode } }",
        "type Foo { a: Int }",
        "query { items { ...Missing } }",
        "query { items { ...A } } fragment A on Item { ...B } fragment B on Item { ...A }",
        "fragment A on Item { barcode }",
        "{ f(a: 1, a: 2) }",
    ],
    ids=["syntax", "subscription", "type-definition", "unknown-fragment", "fragment-cycle", "no-operation", "duplicate-argument"],
)
def test_parse_errors(text: str) -> None:
    with pytest.raises(DocumentError):
        parse(text)


def test_syntax_error_message() -> None:
    with pytest.raises(DocumentError) as info:
        parse("{ items {")
    assert info.value.message.startswith("Syntax Error")


def test_operation_selection() -> None:
    doc = parse("query A { a } query B { b }")

    assert doc.operation("B").name == "B"
    with pytest.raises(DocumentError):
        doc.operation()
    with pytest.raises(DocumentError):
        doc.operation("C")


def test_document_cache_hits() -> None:
    cache = DocumentCache(max_size=4)

    first = cache.get_or_parse("{ items { barcode } }")
    second = cache.get_or_parse("{ items { barcode } }")

    assert first is second
    assert (cache.hits, cache.misses) == (1, 1)


def test_document_cache_does_not_store_failures() -> None:
    cache = DocumentCache()
    for _ in range(2):
        with pytest.raises(DocumentError):
            cache.get_or_parse("{ broken")
    assert len(cache) == 0
    assert cache.misses == 2


def test_document_cache_evicts_least_recent() -> None:
    cache = DocumentCache(max_size=2)
    cache.get_or_parse("{ a }")
    cache.get_or_parse("{ b }")
    cache.get_or_parse("{ a }")
    cache.get_or_parse("{ c }")

    assert "{ a }" in cache
    assert "{ b }" not in cache
    assert len(cache) == 2
