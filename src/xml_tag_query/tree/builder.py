"""Tree building for xml_tag_query.

Turns the tokenizer's event stream into a tree of immutable :class:`XMLTag`
objects. Building walks the token list once, keeping a stack of open
elements. Every open element collects its own children and text, and when it
closes the finished tag is handed to the element below it on the stack, so no
content is shared between levels. Nesting depth is unbounded unless
``TreeConfig.max_tree_depth`` sets a limit.

Content of a tag is the concatenation of its trimmed text segments. The root
is the exception: each of its direct children contributes its re-serialised
markup (``<name attr="value">content</name>``) to the root content, in
document order and interleaved with the root's own text. Deeper levels never
do this. ``TreeConfig.reconstruct_root_markup`` switches the root back to
plain text.
"""

import time
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

from xml_tag_query.shared import (
    DiagnosticEntry,
    DiagnosticSeverity,
    PerformanceMetrics,
    TreeConfig,
    get_logger,
)
from xml_tag_query.tokenization import Token, TokenizationResult

MS_PER_SECOND = 1000

TokenInput = Union[TokenizationResult, Sequence[Token]]


class TreeBuildError(Exception):
    """Raised when the token stream cannot be assembled into a tree."""


@dataclass(frozen=True)
class XMLTag:
    """A parsed element: name, attributes, content and ordered children.

    ``XMLTag()`` is the zero tag returned for a failed parse or query. Tags
    are never modified after construction, so a tree can be queried from
    several threads at once. ``attributes`` is a read-only view over a
    private copy of the mapping passed in.
    """

    name: str = ""
    attributes: Mapping[str, str] = field(default_factory=dict)
    content: str = ""
    children: Tuple["XMLTag", ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "attributes", MappingProxyType(dict(self.attributes))
        )

    def __hash__(self) -> int:
        return hash(
            (self.name, tuple(self.attributes.items()), self.content, self.children)
        )

    @property
    def is_empty(self) -> bool:
        """True for the zero tag and for scalar attribute results."""
        return not self.name

    def get_attribute(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Get attribute value with optional default."""
        return self.attributes.get(name, default)

    def iter_tags(self) -> Iterator["XMLTag"]:
        """Iterate over this tag and all descendants in document order."""
        pending = [self]
        while pending:
            tag = pending.pop()
            yield tag
            pending.extend(reversed(tag.children))

    def find(self, pattern: str) -> "XMLTag":
        """Resolve ``pattern`` from this tag, returning ``XMLTag()`` on failure.

        Use :meth:`resolve` to find out why a pattern did not match.
        """
        from xml_tag_query.query.resolver import find

        return find(self, pattern)

    def resolve(self, pattern: str) -> "XMLTag":
        """Resolve ``pattern`` from this tag.

        Raises:
            QueryError: Subclass describing the step that did not match
        """
        from xml_tag_query.query.resolver import resolve

        return resolve(self, pattern)

    def to_dict(self) -> Dict[str, Any]:
        """Convert tag to dictionary representation."""
        result: Dict[str, Any] = {
            "name": self.name,
            "attributes": dict(self.attributes),
            "content": self.content,
        }
        if self.children:
            result["children"] = [child.to_dict() for child in self.children]
        return result


def serialize_start_tag(name: str, attributes: Mapping[str, str]) -> str:
    """Render an opening tag; attribute values are written verbatim."""
    rendered = "".join(f' {key}="{value}"' for key, value in attributes.items())
    return f"<{name}{rendered}>"


@dataclass
class ParseResult:
    """Outcome of a parse, with diagnostics explaining a failure.

    ``tag`` is the zero tag whenever ``success`` is False; no partial tree
    is ever exposed.
    """

    tag: XMLTag = field(default_factory=XMLTag)
    success: bool = True
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    performance: PerformanceMetrics = field(default_factory=PerformanceMetrics)
    correlation_id: Optional[str] = None

    @property
    def element_count(self) -> int:
        """Get total number of elements in the tree."""
        if self.tag.is_empty:
            return 0
        return sum(1 for _ in self.tag.iter_tags())

    def add_diagnostic(
        self,
        severity: DiagnosticSeverity,
        message: str,
        component: str,
        position: Optional[Dict[str, int]] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        """Add diagnostic entry to result."""
        self.diagnostics.append(
            DiagnosticEntry(
                severity=severity,
                message=message,
                component=component,
                position=position,
                details=details,
                correlation_id=self.correlation_id,
            )
        )

    def get_diagnostics_by_severity(
        self, severity: DiagnosticSeverity
    ) -> List[DiagnosticEntry]:
        """Get diagnostics of specific severity level."""
        return [diag for diag in self.diagnostics if diag.severity == severity]

    def has_errors(self) -> bool:
        """Check if result contains any error diagnostics."""
        return any(
            diag.severity in (DiagnosticSeverity.ERROR, DiagnosticSeverity.CRITICAL)
            for diag in self.diagnostics
        )

    def summary(self) -> Dict[str, Any]:
        """Get summary statistics for the parse result."""
        return {
            "success": self.success,
            "root": self.tag.name,
            "element_count": self.element_count,
            "processing_time_ms": self.performance.processing_time_ms,
            "characters_processed": self.performance.characters_processed,
            "tokens_generated": self.performance.tokens_generated,
            "diagnostics": [diag.to_dict() for diag in self.diagnostics],
        }


@dataclass
class _OpenElement:
    """An element whose end token has not been reached yet."""

    start_token: Optional[Token] = None
    children: List[XMLTag] = field(default_factory=list)
    content_parts: List[str] = field(default_factory=list)

    def close(self) -> XMLTag:
        return XMLTag(
            name=self.start_token.value,
            attributes=self.start_token.attributes,
            content="".join(self.content_parts),
            children=tuple(self.children),
        )


class XMLTreeBuilder:
    """Builds an :class:`XMLTag` tree from a token stream.

    The builder holds configuration only, so one instance can serve any
    number of documents.
    """

    def __init__(
        self,
        config: Optional[TreeConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        self.config = config or TreeConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "xml_tree_builder")

    def build(self, tokens: TokenInput) -> XMLTag:
        """Build the tree, returning ``XMLTag()`` if the tokens do not form one."""
        return self.build_result(tokens).tag

    def build_result(self, tokens: TokenInput) -> ParseResult:
        """Build the tree and report how it went.

        Args:
            tokens: Either a TokenizationResult or a sequence of tokens

        Returns:
            ParseResult holding the root tag or, on failure, the zero tag and
            a CRITICAL diagnostic
        """
        start_time = time.time()
        if isinstance(tokens, TokenizationResult):
            token_list: Sequence[Token] = tokens.tokens
        else:
            token_list = tokens

        self.logger.info(
            "Starting tree building", extra={"token_count": len(token_list)}
        )

        result = ParseResult(correlation_id=self.correlation_id)
        result.performance.tokens_generated = len(token_list)
        if isinstance(tokens, TokenizationResult):
            result.performance.characters_processed = tokens.character_count

        try:
            result.tag = self._build_root(token_list)
        except TreeBuildError as e:
            self.logger.warning("Tree building failed", extra={"error": str(e)})
            result.success = False
            result.add_diagnostic(
                DiagnosticSeverity.CRITICAL,
                f"Tree building failed: {e}",
                "xml_tree_builder",
            )

        result.performance.elements_created = result.element_count
        result.performance.processing_time_ms = (
            (time.time() - start_time) * MS_PER_SECOND
        )

        if result.success:
            self.logger.info(
                "Tree building completed",
                extra={
                    "root_tag": result.tag.name,
                    "element_count": result.performance.elements_created,
                }
            )
        return result

    def _build_root(self, tokens: Sequence[Token]) -> XMLTag:
        """Build the root tag from the first start token to the end of the stream."""
        root = _OpenElement()
        # Elements below the root that have not seen their end token yet.
        open_elements: List[_OpenElement] = []
        max_depth = self.config.max_tree_depth

        for token in tokens:
            current = open_elements[-1] if open_elements else root

            if token.is_start:
                if root.start_token is None:
                    root.start_token = token
                    continue
                if max_depth is not None and len(open_elements) >= max_depth:
                    raise TreeBuildError(
                        f"Maximum tree depth {max_depth} exceeded at <{token.value}>"
                    )
                open_elements.append(_OpenElement(token))
            elif token.is_text:
                self._append_text(current.content_parts, token)
            elif (
                token.is_end
                and open_elements
                and token.value == current.start_token.value
            ):
                child = open_elements.pop().close()
                parent = open_elements[-1] if open_elements else root
                parent.children.append(child)
                self._append_child_content(
                    parent.content_parts,
                    child,
                    reconstruct_markup=(
                        parent is root and self.config.reconstruct_root_markup
                    ),
                )

        if root.start_token is None:
            raise TreeBuildError("No start element found")
        if open_elements:
            raise TreeBuildError(
                f"Unexpected end of input inside <{open_elements[-1].start_token.value}>"
            )
        return root.close()

    @staticmethod
    def _append_text(content_parts: List[str], token: Token) -> None:
        text = token.value.strip()
        if text:
            content_parts.append(text)

    @staticmethod
    def _append_child_content(
        content_parts: List[str], child: XMLTag, reconstruct_markup: bool
    ) -> None:
        # Only the root level ever passes reconstruct_markup=True.
        if reconstruct_markup:
            content_parts.append(serialize_start_tag(child.name, child.attributes))
            content_parts.append(child.content)
            content_parts.append(f"</{child.name}>")
