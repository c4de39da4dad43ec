"""Event tokenizer turning XML text into start-tag, end-tag and text tokens.

Lexing itself is delegated to the expat parser shipped with Python; this
module only records the events expat reports, in document order, as
:class:`Token` objects the tree builder can walk.
"""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, List, Optional
from xml.parsers import expat

from xml_tag_query.shared import get_logger

MS_PER_SECOND = 1000


class TokenType(Enum):
    """Kinds of events produced by the tokenizer."""

    START_ELEMENT = auto()      # <name attr="value">
    END_ELEMENT = auto()        # </name>, also reported for <name/>
    TEXT = auto()               # Character data, CDATA included


class TokenizationError(Exception):
    """Raised when the document text is not well-formed XML."""

    def __init__(
        self, message: str, line: Optional[int] = None, column: Optional[int] = None
    ) -> None:
        super().__init__(message)
        self.line = line
        self.column = column


@dataclass
class TokenPosition:
    """Position information for tokens."""

    line: int
    column: int
    offset: int

    def __post_init__(self) -> None:
        """Validate position values."""
        if self.line < 1:
            raise ValueError("Line number must be >= 1")
        if self.column < 1:
            raise ValueError("Column number must be >= 1")
        if self.offset < 0:
            raise ValueError("Offset must be >= 0")


@dataclass
class Token:
    """Single tokenizer event.

    ``value`` holds the element name for start/end tokens and the raw
    character data for text tokens. ``attributes`` keeps the order in which
    the attributes appear on the opening tag.
    """

    type: TokenType
    value: str
    position: Optional[TokenPosition] = None
    attributes: Dict[str, str] = field(default_factory=dict)

    @property
    def is_start(self) -> bool:
        return self.type is TokenType.START_ELEMENT

    @property
    def is_end(self) -> bool:
        return self.type is TokenType.END_ELEMENT

    @property
    def is_text(self) -> bool:
        return self.type is TokenType.TEXT


@dataclass
class TokenizationResult:
    """Tokens of one document plus the cost of producing them."""

    tokens: List[Token]
    character_count: int = 0
    processing_time_ms: float = 0.0

    @property
    def token_count(self) -> int:
        """Get the total number of tokens."""
        return len(self.tokens)

    @property
    def element_count(self) -> int:
        """Get the number of elements opened in the document."""
        return sum(1 for token in self.tokens if token.is_start)


def local_name(name: str) -> str:
    """Drop the namespace prefix from a qualified name.

    ``p:b`` becomes ``b``. No namespace resolution takes place, so the prefix
    need not be bound. Names without a prefix, or with an empty part on
    either side of the colon, are returned unchanged.
    """
    prefix, _, local = name.rpartition(":")
    if prefix and local:
        return local
    return name


class _EventCollector:
    """Expat handler set accumulating tokens for a single document."""

    def __init__(self, parser: "expat.XMLParserType") -> None:
        self.parser = parser
        self.tokens: List[Token] = []
        # Text arriving while a segment is open extends the last token.
        self._segment_open = False

        parser.StartElementHandler = self.start_element
        parser.EndElementHandler = self.end_element
        parser.CharacterDataHandler = self.character_data
        parser.StartCdataSectionHandler = self.close_segment
        parser.EndCdataSectionHandler = self.close_segment
        parser.CommentHandler = self.comment
        parser.ProcessingInstructionHandler = self.processing_instruction

    def _position(self) -> TokenPosition:
        return TokenPosition(
            line=self.parser.CurrentLineNumber,
            column=self.parser.CurrentColumnNumber + 1,
            offset=max(self.parser.CurrentByteIndex, 0),
        )

    def start_element(self, name: str, attributes: Dict[str, str]) -> None:
        self._segment_open = False
        self.tokens.append(
            Token(
                TokenType.START_ELEMENT,
                local_name(name),
                self._position(),
                {local_name(key): value for key, value in attributes.items()},
            )
        )

    def end_element(self, name: str) -> None:
        self._segment_open = False
        self.tokens.append(Token(TokenType.END_ELEMENT, local_name(name), self._position()))

    def character_data(self, data: str) -> None:
        if self._segment_open:
            last = self.tokens[-1]
            last.value += data
            return
        self.tokens.append(Token(TokenType.TEXT, data, self._position()))
        self._segment_open = True

    def close_segment(self) -> None:
        self._segment_open = False

    # Comments and processing instructions end a text segment without
    # producing a token of their own.
    def comment(self, data: str) -> None:
        self.close_segment()

    def processing_instruction(self, target: str, data: str) -> None:
        self.close_segment()


class XMLTokenizer:
    """Converts XML text into an ordered list of :class:`Token` events.

    Comments, processing instructions and the document type declaration are
    consumed by expat without producing tokens, though a comment or processing
    instruction still separates the text on either side of it. Element and
    attribute names are reported by their local part, see :func:`local_name`.
    """

    def __init__(self, correlation_id: Optional[str] = None) -> None:
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "xml_tokenizer")

    def tokenize(self, xml_text: str) -> TokenizationResult:
        """Tokenize a complete document.

        Args:
            xml_text: Document text

        Returns:
            TokenizationResult with the tokens in document order

        Raises:
            TokenizationError: If the text is not well-formed XML
        """
        start_time = time.time()
        parser = expat.ParserCreate()
        parser.buffer_text = True
        collector = _EventCollector(parser)

        try:
            parser.Parse(xml_text, True)
        except expat.ExpatError as e:
            self.logger.debug(
                "Tokenization failed",
                extra={"error": str(e), "line": e.lineno, "column": e.offset}
            )
            raise TokenizationError(
                f"XML syntax error: {expat.ErrorString(e.code)}",
                line=e.lineno,
                column=e.offset + 1,
            ) from e

        result = TokenizationResult(
            tokens=collector.tokens,
            character_count=len(xml_text),
            processing_time_ms=(time.time() - start_time) * MS_PER_SECOND,
        )
        self.logger.debug(
            "Tokenization completed",
            extra={
                "token_count": result.token_count,
                "character_count": result.character_count,
            }
        )
        return result
