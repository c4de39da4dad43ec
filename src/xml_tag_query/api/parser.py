"""Public parsing and query API with progressive disclosure.

Level 1 is a handful of module functions:

* :func:`parse` - document text to root tag, ``XMLTag()`` on failure
* :func:`parse_detailed` - the same parse with diagnostics and metrics
* :func:`query` - silent pattern lookup, ``XMLTag()`` on failure
* :func:`query_strict` - pattern lookup raising :class:`QueryError`
* :func:`search` - parse followed by a silent query

Level 2 is :class:`XMLTagParser`, which carries a :class:`ParserConfig` and
reuses its tokenizer, builder and resolver across documents.
"""

import time
from typing import Any, Dict, Optional, Union

from xml_tag_query.query import PathResolver, find, resolve
from xml_tag_query.shared import DiagnosticSeverity, ParserConfig, get_logger
from xml_tag_query.tokenization import TokenizationError, XMLTokenizer
from xml_tag_query.tree import ParseResult, XMLTag, XMLTreeBuilder

InputType = Union[str, bytes]

PREVIEW_LENGTH = 100  # Max length for content preview in logs
MS_PER_SECOND = 1000


def _preview(xml_text: InputType) -> str:
    text = xml_text if isinstance(xml_text, str) else repr(xml_text)
    if len(text) > PREVIEW_LENGTH:
        return text[:PREVIEW_LENGTH] + "..."
    return text


def _run_parse(
    xml_text: InputType,
    tokenizer: XMLTokenizer,
    tree_builder: XMLTreeBuilder,
    correlation_id: Optional[str]
) -> ParseResult:
    """Tokenize and build, turning a tokenizer error into a failed result."""
    start_time = time.time()
    logger = get_logger(__name__, correlation_id, "parse")

    logger.info(
        "Starting parse operation",
        extra={"content_length": len(xml_text), "preview": _preview(xml_text)}
    )

    try:
        tokenization_result = tokenizer.tokenize(xml_text)
    except TokenizationError as e:
        logger.warning(
            "Document is not well-formed",
            extra={"error": str(e), "line": e.line, "column": e.column}
        )
        result = ParseResult(success=False, correlation_id=correlation_id)
        result.performance.characters_processed = len(xml_text)
        result.performance.processing_time_ms = (
            (time.time() - start_time) * MS_PER_SECOND
        )
        result.add_diagnostic(
            DiagnosticSeverity.CRITICAL,
            str(e),
            "xml_tokenizer",
            position={"line": e.line or 0, "column": e.column or 0},
        )
        return result

    result = tree_builder.build_result(tokenization_result)
    result.performance.processing_time_ms = (time.time() - start_time) * MS_PER_SECOND
    return result


def parse_detailed(
    xml_text: InputType, correlation_id: Optional[str] = None
) -> ParseResult:
    """Parse a document and report diagnostics and metrics.

    Args:
        xml_text: Document text (bytes are decoded by the XML declaration)
        correlation_id: Optional correlation ID for request tracking

    Returns:
        ParseResult whose ``tag`` is the root, or the zero tag with a
        CRITICAL diagnostic if the document could not be parsed

    Examples:
        >>> result = parse_detailed('<a><b/>')
        >>> result.success
        False
        >>> result.diagnostics[0].message
        'XML syntax error: no element found'
    """
    return _run_parse(
        xml_text,
        XMLTokenizer(correlation_id=correlation_id),
        XMLTreeBuilder(correlation_id=correlation_id),
        correlation_id,
    )


def parse(xml_text: InputType, correlation_id: Optional[str] = None) -> XMLTag:
    """Parse a document into its root tag.

    Failure is reported only by the result being ``XMLTag()``; check
    ``tag.name == ""`` (or ``tag.is_empty``). Use :func:`parse_detailed` to
    learn why a document was rejected.

    Examples:
        >>> root = parse('<a x="1"><b>hi</b><c/></a>')
        >>> root.name, dict(root.attributes), root.content
        ('a', {'x': '1'}, '<b>hi</b><c></c>')
        >>> [child.name for child in root.children]
        ['b', 'c']
    """
    return parse_detailed(xml_text, correlation_id).tag


def query_strict(root: XMLTag, pattern: str) -> XMLTag:
    """Resolve ``pattern`` against ``root``, raising a QueryError on failure.

    Examples:
        >>> query_strict(parse('<a><b/></a>'), 'z')
        Traceback (most recent call last):
        ...
        xml_tag_query.query.errors.TagNotFoundError: tag z not found
    """
    return resolve(root, pattern)


def query(root: XMLTag, pattern: str) -> XMLTag:
    """Resolve ``pattern`` against ``root``, returning ``XMLTag()`` on failure.

    Examples:
        >>> root = parse('<a x="1"><b>hi</b><c/></a>')
        >>> query(root, 'b').content
        'hi'
        >>> query(root, '@x').content
        '1'
        >>> query(root, '[1]').name
        'c'
        >>> query(root, 'z') == XMLTag()
        True
    """
    return find(root, pattern)


def search(
    xml_text: InputType, pattern: str, correlation_id: Optional[str] = None
) -> XMLTag:
    """Parse ``xml_text`` and resolve ``pattern`` against its root.

    Returns ``XMLTag()`` if either the parse or the query fails.
    """
    return query(parse(xml_text, correlation_id), pattern)


class XMLTagParser:
    """Configured parser reusing its components across documents.

    Examples:
        >>> parser = XMLTagParser(ParserConfig.plain_content())
        >>> root = parser.parse('<a>text<b>hi</b></a>')
        >>> root.content
        'text'
        >>> parser.find(root, 'b').content
        'hi'
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        self.config = config or ParserConfig.default()
        self.correlation_id = correlation_id or self.config.correlation_id
        self.logger = get_logger(__name__, self.correlation_id, "xml_tag_parser")
        self._create_components()

        self._parse_count = 0
        self._successful_parses = 0
        self._total_processing_time = 0.0

        self.logger.info(
            "XMLTagParser initialized", extra={"config_name": self.config.name}
        )

    def _create_components(self) -> None:
        self._tokenizer = XMLTokenizer(correlation_id=self.correlation_id)
        self._tree_builder = XMLTreeBuilder(
            config=self.config.tree, correlation_id=self.correlation_id
        )
        self._resolver = PathResolver(
            config=self.config.query, correlation_id=self.correlation_id
        )

    def parse_detailed(self, xml_text: InputType) -> ParseResult:
        """Parse a document and report diagnostics and metrics."""
        result = _run_parse(
            xml_text, self._tokenizer, self._tree_builder, self.correlation_id
        )

        self._parse_count += 1
        self._total_processing_time += result.performance.processing_time_ms
        if result.success:
            self._successful_parses += 1
        return result

    def parse(self, xml_text: InputType) -> XMLTag:
        """Parse a document into its root tag, ``XMLTag()`` on failure."""
        return self.parse_detailed(xml_text).tag

    def resolve(self, root: XMLTag, pattern: str) -> XMLTag:
        """Resolve ``pattern`` against ``root``, raising a QueryError on failure."""
        return self._resolver.resolve(root, pattern)

    def find(self, root: XMLTag, pattern: str) -> XMLTag:
        """Resolve ``pattern`` against ``root``, returning ``XMLTag()`` on failure."""
        return self._resolver.find(root, pattern)

    def search(self, xml_text: InputType, pattern: str) -> XMLTag:
        """Parse ``xml_text`` and silently resolve ``pattern`` against its root."""
        return self.find(self.parse(xml_text), pattern)

    def reconfigure(self, config: ParserConfig) -> None:
        """Replace the configuration and rebuild the components."""
        self.config = config
        self._create_components()
        self.logger.info("Parser reconfigured", extra={"config_name": config.name})

    @property
    def statistics(self) -> Dict[str, Any]:
        """Get parser usage statistics."""
        return {
            "total_parses": self._parse_count,
            "successful_parses": self._successful_parses,
            "success_rate": (
                self._successful_parses / self._parse_count
                if self._parse_count > 0 else 0.0
            ),
            "total_processing_time_ms": self._total_processing_time,
            "average_processing_time_ms": (
                self._total_processing_time / self._parse_count
                if self._parse_count > 0 else 0.0
            ),
            "correlation_id": self.correlation_id,
        }

    def reset_statistics(self) -> None:
        """Reset parser usage statistics."""
        self._parse_count = 0
        self._successful_parses = 0
        self._total_processing_time = 0.0
        self.logger.info("Parser statistics reset")
