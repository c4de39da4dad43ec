"""xml_tag_query: parse XML into a tag tree and query it with simple paths.

Patterns are ``/``-separated steps: a tag name selects the first child with
that name, ``[N]`` selects the child at position N and ``@attr`` yields the
value of an attribute.

Progressive API Disclosure:
- Level 1: Simple functions - parse(), query(), search()
- Level 2: Configured parser - XMLTagParser with ParserConfig
"""

__version__ = "0.1.0"
__author__ = "XML Tag Query Team"

from .api import XMLTagParser, parse, parse_detailed, query, query_strict, search
from .query import (
    AttributeNotFoundError,
    EmptyTreeError,
    IndexOutOfRangeError,
    InvalidIndexFormatError,
    PathResolver,
    QueryError,
    TagNotFoundError,
)
from .shared.config import ParserConfig, QueryConfig, TreeConfig
from .tree import ParseResult, XMLTag, XMLTreeBuilder

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: simple functions
    "parse",
    "parse_detailed",
    "query",
    "query_strict",
    "search",

    # Level 2: configured parser and its components
    "XMLTagParser",
    "XMLTreeBuilder",
    "PathResolver",

    # Data structures
    "ParseResult",
    "XMLTag",

    # Configuration
    "ParserConfig",
    "QueryConfig",
    "TreeConfig",

    # Query errors
    "QueryError",
    "AttributeNotFoundError",
    "EmptyTreeError",
    "IndexOutOfRangeError",
    "InvalidIndexFormatError",
    "TagNotFoundError",
]
