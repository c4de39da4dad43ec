"""Tests for the public parsing and query API.

Covers the Level 1 functions and the configured XMLTagParser class.
"""

import pytest

from xml_tag_query.api.parser import (
    XMLTagParser,
    parse,
    parse_detailed,
    query,
    query_strict,
    search,
)
from xml_tag_query.query import IndexOutOfRangeError, TagNotFoundError
from xml_tag_query.shared import DiagnosticSeverity, ParserConfig
from xml_tag_query.tree import ParseResult, XMLTag


class TestSimpleParsingFunctions:
    """Test Level 1: module-level functions."""

    def test_parse_reference_document(self):
        """Test parsing a small well-formed document."""
        root = parse('<a x="1"><b>hi</b><c/></a>')

        assert root.name == "a"
        assert root.attributes == {"x": "1"}
        assert [child.name for child in root.children] == ["b", "c"]
        assert root.children[0].content == "hi"

    def test_parse_with_declaration_and_comments(self):
        """Test that prolog and comments do not affect the tree."""
        root = parse('<?xml version="1.0"?>\n<!-- header -->\n<r><!-- x --><a>1</a></r>')

        assert root.name == "r"
        assert root.content == "<a>1</a>"

    def test_parse_bytes(self):
        """Test parsing encoded bytes."""
        root = parse('<?xml version="1.0" encoding="UTF-8"?><r>ü</r>'.encode("utf-8"))

        assert root.content == "ü"

    @pytest.mark.parametrize(
        "xml",
        ["", "   ", "<a>", "<a><b></a>", "not xml", "<a/><b/>", '<a x="1" x="2"/>'],
    )
    def test_parse_failure_returns_zero_tag(self, xml):
        """Test that malformed documents give the zero tag."""
        root = parse(xml)

        assert root == XMLTag()
        assert root.name == ""

    def test_parse_detailed_success(self):
        """Test the detailed result for a good document."""
        xml = "<r><a/><b>t</b></r>"

        result = parse_detailed(xml, correlation_id="doc-1")

        assert isinstance(result, ParseResult)
        assert result.success is True
        assert result.tag.name == "r"
        assert result.diagnostics == []
        assert result.correlation_id == "doc-1"
        assert result.performance.characters_processed == len(xml)
        assert result.performance.tokens_generated == 7
        assert result.performance.elements_created == 3
        assert result.performance.processing_time_ms >= 0.0

    def test_parse_detailed_failure(self):
        """Test that a tokenizer error becomes a CRITICAL diagnostic."""
        result = parse_detailed("<a>\n<b></a>")

        assert result.success is False
        assert result.tag == XMLTag()
        critical = result.get_diagnostics_by_severity(DiagnosticSeverity.CRITICAL)
        assert len(critical) == 1
        assert critical[0].component == "xml_tokenizer"
        assert "mismatched tag" in critical[0].message
        assert critical[0].position["line"] == 2

    def test_query_and_query_strict(self):
        """Test the silent and strict query forms on the same input."""
        root = parse('<a x="1"><b>hi</b><c/></a>')

        assert query(root, "b").content == "hi"
        assert query(root, "@x") == XMLTag(content="1")
        assert query(root, "[1]").name == "c"
        assert query(root, "z") == XMLTag()
        with pytest.raises(TagNotFoundError):
            query_strict(root, "z")
        with pytest.raises(IndexOutOfRangeError):
            query_strict(root, "[5]")

    def test_search(self):
        """Test parsing and querying in one call."""
        assert search('<a><b id="7"/></a>', "b/@id").content == "7"
        assert search("<a><b/>", "b") == XMLTag()
        assert search("<a><b/></a>", "c") == XMLTag()

    def test_query_functions_use_the_shared_resolver(self, monkeypatch):
        """Test that module-level queries do not build a resolver per call."""
        def fail(*args, **kwargs):
            raise AssertionError("PathResolver constructed")

        monkeypatch.setattr("xml_tag_query.api.parser.PathResolver", fail)
        root = parse('<a x="1"><b>hi</b></a>')

        assert query(root, "b").content == "hi"
        assert query_strict(root, "@x").content == "1"
        assert search("<a><b>t</b></a>", "b").content == "t"

    def test_parse_deeply_nested_document(self):
        """Test that a well-formed document parses whatever its depth."""
        depth = 1000
        xml = "<r>" + "<a>" * depth + "x" + "</a>" * depth + "</r>"

        root = parse(xml)

        assert root.name == "r"
        assert query(root, "/".join(["a"] * depth)).content == "x"

    def test_namespaced_document_is_queried_by_local_name(self):
        """Test querying prefixed elements without the prefix."""
        root = parse('<r xmlns:p="urn:x"><p:b>hi</p:b></r>')

        assert root.children[0].name == "b"
        assert query_strict(root, "b").content == "hi"


class TestXMLTagParser:
    """Test Level 2: the configured parser class."""

    def test_default_configuration(self):
        """Test parser defaults."""
        parser = XMLTagParser()

        assert parser.config == ParserConfig.default()
        assert parser.correlation_id is None

    def test_correlation_id_from_config(self):
        """Test that the configuration supplies the correlation ID."""
        parser = XMLTagParser(ParserConfig(correlation_id="cfg"))

        assert parser.correlation_id == "cfg"
        assert parser.parse_detailed("<r/>").correlation_id == "cfg"

    def test_parse_and_find(self):
        """Test parsing and querying through one parser."""
        parser = XMLTagParser()
        root = parser.parse('<r><a id="1">t</a></r>')

        assert parser.find(root, "a").content == "t"
        assert parser.resolve(root, "a/@id").content == "1"
        assert parser.find(root, "b") == XMLTag()
        with pytest.raises(TagNotFoundError):
            parser.resolve(root, "b")

    def test_search(self):
        """Test the combined parse and query."""
        parser = XMLTagParser()

        assert parser.search("<r><a>t</a></r>", "a").content == "t"

    def test_plain_content_preset(self):
        """Test turning off root markup reconstruction."""
        parser = XMLTagParser(ParserConfig.plain_content())

        root = parser.parse("<r>lead<a>t</a>tail</r>")

        assert root.content == "leadtail"
        assert root.children[0].content == "t"

    def test_custom_query_markers(self):
        """Test that the query configuration reaches the resolver."""
        config = ParserConfig().override(query__separator=".")
        parser = XMLTagParser(config)
        root = parser.parse("<r><a><b>t</b></a></r>")

        assert parser.find(root, "a.b").content == "t"
        assert parser.find(root, "a/b") == XMLTag()

    def test_depth_limit_from_configuration(self):
        """Test that the tree configuration reaches the builder."""
        parser = XMLTagParser(ParserConfig().override(tree__max_tree_depth=1))

        assert parser.parse("<r><a/></r>").name == "r"
        assert parser.parse("<r><a><b/></a></r>") == XMLTag()

    def test_reconfigure(self):
        """Test swapping configuration on an existing parser."""
        parser = XMLTagParser()
        xml = "<r>lead<a>t</a></r>"
        assert parser.parse(xml).content == "lead<a>t</a>"

        parser.reconfigure(ParserConfig.plain_content())

        assert parser.parse(xml).content == "lead"

    def test_statistics(self):
        """Test usage statistics across several parses."""
        parser = XMLTagParser()
        parser.parse("<r/>")
        parser.parse("<r>")
        parser.parse("<r><a/></r>")

        stats = parser.statistics
        assert stats["total_parses"] == 3
        assert stats["successful_parses"] == 2
        assert stats["success_rate"] == pytest.approx(2 / 3)
        assert stats["total_processing_time_ms"] >= 0.0

    def test_reset_statistics(self):
        """Test clearing usage statistics."""
        parser = XMLTagParser()
        parser.parse("<r/>")

        parser.reset_statistics()

        assert parser.statistics["total_parses"] == 0
        assert parser.statistics["success_rate"] == 0.0
        assert parser.statistics["average_processing_time_ms"] == 0.0
