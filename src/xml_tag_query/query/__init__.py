"""Path query layer for xml_tag_query.

Key Components:
    PathResolver: Resolves patterns against a tag tree
    PatternParser: Splits patterns into steps and classifies them
    QueryError: Base of the resolution errors
"""

from .errors import (
    AttributeNotFoundError,
    EmptyTreeError,
    IndexOutOfRangeError,
    InvalidIndexFormatError,
    QueryError,
    TagNotFoundError,
)
from .pattern import (
    PatternParser,
    PatternStep,
    StepKind,
    parse_index,
    parse_pattern,
)
from .resolver import (
    PathResolver,
    find,
    resolve,
)

__all__ = [
    "AttributeNotFoundError",
    "EmptyTreeError",
    "IndexOutOfRangeError",
    "InvalidIndexFormatError",
    "QueryError",
    "TagNotFoundError",
    "PatternParser",
    "PatternStep",
    "StepKind",
    "parse_index",
    "parse_pattern",
    "PathResolver",
    "find",
    "resolve",
]
