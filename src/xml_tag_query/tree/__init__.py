"""Tree building layer for xml_tag_query.

Key Components:
    XMLTreeBuilder: Builds the tag tree from a token stream
    XMLTag: Immutable element with name, attributes, content and children
    ParseResult: Root tag plus diagnostics and metrics for a parse
"""

from .builder import (
    ParseResult,
    TreeBuildError,
    XMLTag,
    XMLTreeBuilder,
    serialize_start_tag,
)

__all__ = [
    "ParseResult",
    "TreeBuildError",
    "XMLTag",
    "XMLTreeBuilder",
    "serialize_start_tag",
]
