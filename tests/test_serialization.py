"""Tests for AST serialization and token dumps."""

import json

import pytest

from mathmark import parse
from mathmark.config import ParseConfig
from mathmark.errors import ErrorKind
from mathmark.lexer import tokenize
from mathmark.nodes import CodeBlock, Document, Hr, Paragraph, Text
from mathmark.serialization import from_dict, from_json, to_dict, to_json, tokens_to_list
from mathmark.tokens import HrStyle

SAMPLE = """# Notes on **groups**

A group is a set with an operation.~See $G \\times G \\to G$.

%def Group
- closure
- associativity
  - with ..care..
%%

\\[e \\cdot g = g\\]

```py
x = 1```

^^^
"""


class TestRoundTrip:
    """to_json/from_json reproduce the tree."""

    def test_sample_document(self) -> None:
        doc = parse(SAMPLE)
        assert from_json(to_json(doc)) == doc

    def test_links(self) -> None:
        doc = parse("[**a**](http://x)", config=ParseConfig(links_enabled=True))
        assert from_json(to_json(doc)) == doc

    def test_locations_preserved(self) -> None:
        doc = parse("a\n\n**b**", source_file="n.mm")
        restored = from_json(to_json(doc))
        assert restored.location == doc.location
        assert restored.children[1].location == doc.children[1].location
        assert restored.children[1].children[0].location.lineno == 3

    def test_diagnostics_preserved(self) -> None:
        doc = parse("**open", source_file="n.mm")
        restored = from_json(to_json(doc))
        assert restored.diagnostics == doc.diagnostics
        assert restored.diagnostics[0].kind is ErrorKind.UNTERMINATED_SPAN


class TestToDict:
    """Dict shape of serialized nodes."""

    def test_type_discriminator(self) -> None:
        data = to_dict(Paragraph((Text("x"),)))
        assert data["_type"] == "Paragraph"
        assert data["children"][0] == {"_type": "Text", "content": "x", "location": None}

    def test_enums_stored_by_value(self) -> None:
        assert to_dict(Hr(HrStyle.DOTTED))["style"] == "dotted"

    def test_optional_field(self) -> None:
        assert to_dict(CodeBlock("x"))["language"] is None

    def test_json_keys_sorted(self) -> None:
        text = to_json(parse("x"))
        assert list(json.loads(text)) == sorted(json.loads(text))


class TestFromDictErrors:
    """Malformed input is rejected."""

    def test_missing_type(self) -> None:
        with pytest.raises(ValueError, match="no '_type' tag"):
            from_dict({"content": "x"})

    def test_unknown_type(self) -> None:
        with pytest.raises(ValueError, match="unknown node type 'Table'"):
            from_dict({"_type": "Table"})

    def test_from_json_requires_document(self) -> None:
        with pytest.raises(ValueError, match="expected a Document"):
            from_json(json.dumps(to_dict(Text("x"))))

    def test_from_dict_document(self) -> None:
        node = from_dict({"_type": "Document", "children": []})
        assert node == Document(())


class TestTokenDump:
    """tokens_to_list flattens tokens for inspection."""

    def test_nbsp(self) -> None:
        assert tokens_to_list(tokenize("~")) == [
            {"type": "NBSP", "value": "", "level": 0, "lineno": 1, "col": 1}
        ]

    def test_positions(self) -> None:
        dump = tokens_to_list(tokenize("a\n# b"))
        assert [(d["type"], d["lineno"], d["col"]) for d in dump] == [
            ("TEXT", 1, 1),
            ("NEWLINE", 1, 2),
            ("HEADER", 2, 1),
            ("TEXT", 2, 3),
        ]

    def test_json_compatible(self) -> None:
        dump = tokens_to_list(tokenize("- **a** $b$"))
        assert json.loads(json.dumps(dump)) == dump
