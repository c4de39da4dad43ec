"""Public API for xml_tag_query.

Level 1: parse(), parse_detailed(), query(), query_strict(), search()
Level 2: XMLTagParser
"""

from .parser import (
    XMLTagParser,
    parse,
    parse_detailed,
    query,
    query_strict,
    search,
)

__all__ = [
    "XMLTagParser",
    "parse",
    "parse_detailed",
    "query",
    "query_strict",
    "search",
]
