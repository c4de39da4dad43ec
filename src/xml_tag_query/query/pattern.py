"""Pattern language: splitting a pattern into steps and classifying them.

A pattern is a separator-delimited list of steps. Each step is one of

* ``name`` - the first child with that tag name,
* ``[N]`` - the child at zero-based position N,
* ``@attr`` - the value of attribute ``attr`` on the current tag.

Splitting never fails. Steps are classified one at a time while resolving,
so a malformed index is only reported once resolution reaches it.
"""

import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Optional

from xml_tag_query.shared import QueryConfig

from .errors import InvalidIndexFormatError

_INDEX_RE = re.compile(r"[+-]?[0-9]+")

# Indexes must fit a signed 64-bit integer.
INDEX_MIN = -(2 ** 63)
INDEX_MAX = 2 ** 63 - 1


class StepKind(Enum):
    """Kinds of pattern steps."""

    NAME = auto()
    INDEX = auto()
    ATTRIBUTE = auto()


def parse_index(text: str) -> int:
    """Parse the inside of an index step as a signed base-10 integer.

    Raises:
        InvalidIndexFormatError: If ``text`` is not an integer literal or
            does not fit in 64 bits
    """
    if not _INDEX_RE.fullmatch(text):
        raise InvalidIndexFormatError(text)
    # Checked before int() so huge literals never hit the digit limit.
    if len(text.lstrip("+-").lstrip("0")) > len(str(INDEX_MAX)):
        raise InvalidIndexFormatError(text)
    value = int(text)
    if not INDEX_MIN <= value <= INDEX_MAX:
        raise InvalidIndexFormatError(text)
    return value


@dataclass(frozen=True)
class PatternStep:
    """One classified step of a pattern.

    ``value`` is the tag name for name steps, the attribute name for
    attribute steps and the unparsed text between the brackets for index
    steps.
    """

    kind: StepKind
    raw: str
    value: str

    @property
    def index(self) -> int:
        """Child position selected by an index step."""
        if self.kind is not StepKind.INDEX:
            raise TypeError(f"{self.raw!r} is not an index step")
        return parse_index(self.value)


class PatternParser:
    """Splits patterns and classifies steps according to a QueryConfig."""

    def __init__(self, config: Optional[QueryConfig] = None) -> None:
        self.config = config or QueryConfig()

    def split(self, pattern: str) -> List[str]:
        """Split ``pattern`` into raw step strings.

        One leading and one trailing separator are dropped; the rest is split
        verbatim. An empty pattern gives a single empty step.
        """
        separator = self.config.separator
        if pattern.startswith(separator):
            pattern = pattern[len(separator):]
        if pattern.endswith(separator):
            pattern = pattern[:-len(separator)]
        return pattern.split(separator)

    def classify(self, raw: str) -> PatternStep:
        """Work out which kind of step ``raw`` is."""
        config = self.config
        if raw.startswith(config.attribute_marker):
            return PatternStep(
                StepKind.ATTRIBUTE, raw, raw[len(config.attribute_marker):]
            )
        if (
            len(raw) >= len(config.index_open) + len(config.index_close)
            and raw.startswith(config.index_open)
            and raw.endswith(config.index_close)
        ):
            return PatternStep(
                StepKind.INDEX, raw, raw.strip(config.index_open + config.index_close)
            )
        return PatternStep(StepKind.NAME, raw, raw)

    def parse(self, pattern: str) -> List[PatternStep]:
        """Split and classify every step of ``pattern``."""
        return [self.classify(raw) for raw in self.split(pattern)]


_default_parser = PatternParser()


def parse_pattern(pattern: str) -> List[str]:
    """Split ``pattern`` with the default separator."""
    return _default_parser.split(pattern)
