"""Tokenization layer for xml_tag_query.

Key Components:
    XMLTokenizer: Turns document text into start-tag, end-tag and text tokens
    Token: A single tokenizer event with position information
    TokenType: Enumeration of the three event kinds
    TokenizationError: Raised for text that is not well-formed XML
    local_name: Strips the namespace prefix from element and attribute names
"""

from .tokenizer import (
    Token,
    TokenizationError,
    TokenizationResult,
    TokenPosition,
    TokenType,
    XMLTokenizer,
    local_name,
)

__all__ = [
    "Token",
    "TokenizationError",
    "TokenizationResult",
    "TokenPosition",
    "TokenType",
    "XMLTokenizer",
    "local_name",
]
