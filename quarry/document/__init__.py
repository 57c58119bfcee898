"""
Document — parsed, immutable query trees.

    from quarry.document import parse, DocumentCache

    doc = parse('query Q($b: String!) { item(barcode: $b) { title } }')
    op = doc.operation("Q")

    cache = DocumentCache(max_size=256)
    cache.get_or_parse("{ items { barcode } }")  # parsed
    cache.get_or_parse("{ items { barcode } }")  # cached
"""

from quarry.document._types import (
    Variable,
    Directive,
    FieldNode,
    InlineFragment,
    Selection,
    VariableDefinition,
    Operation,
    Document,
)
from quarry.document._parse import parse
from quarry.document._cache import DocumentCache

__all__ = (
    "Variable",
    "Directive",
    "FieldNode",
    "InlineFragment",
    "Selection",
    "VariableDefinition",
    "Operation",
    "Document",
    "parse",
    "DocumentCache",
)
