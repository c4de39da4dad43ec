"""Exceptions raised when a pattern cannot be resolved against a tree."""


class QueryError(Exception):
    """Base exception for pattern resolution failures."""


class EmptyTreeError(QueryError):
    """The tree being queried is the zero tag of a failed parse."""

    def __init__(self) -> None:
        super().__init__("cannot query an empty tree: XML parsing failed")


class AttributeNotFoundError(QueryError):
    """The current tag has no attribute with the requested name."""

    def __init__(self, attribute: str) -> None:
        super().__init__(f"attribute {attribute} not found")
        self.attribute = attribute


class InvalidIndexFormatError(QueryError):
    """An index step does not hold a base-10 integer."""

    def __init__(self, text: str) -> None:
        super().__init__(f"invalid index format: {text}")
        self.text = text


class IndexOutOfRangeError(QueryError):
    """An index step points past the children of the current tag."""

    def __init__(self, index: int) -> None:
        super().__init__(f"tag with index {index} not found")
        self.index = index


class TagNotFoundError(QueryError):
    """No child of the current tag has the requested name."""

    def __init__(self, tag: str) -> None:
        super().__init__(f"tag {tag} not found")
        self.tag = tag
