"""Path resolution over an :class:`XMLTag` tree.

:meth:`PathResolver.resolve` walks the tree step by step and raises a
:class:`QueryError` subclass naming the step that failed.
:meth:`PathResolver.find` is the convenience form that returns the zero tag
instead; callers of ``find`` cannot tell a missing tag from a malformed
pattern.

Matching is first-match, left to right, with no backtracking: once a name
step has picked the first child with that name, a later step failing below
it does not make the resolver try that child's same-named siblings.
"""

from typing import List, Optional

from xml_tag_query.shared import QueryConfig, get_logger
from xml_tag_query.tree.builder import XMLTag

from .errors import (
    AttributeNotFoundError,
    EmptyTreeError,
    IndexOutOfRangeError,
    QueryError,
    TagNotFoundError,
)
from .pattern import PatternParser, PatternStep, StepKind


class PathResolver:
    """Resolves patterns against tag trees.

    The resolver never modifies the tree, so repeated queries give equal
    results and one tree can be queried concurrently.
    """

    def __init__(
        self,
        config: Optional[QueryConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        self.config = config or QueryConfig()
        self.correlation_id = correlation_id
        self.parser = PatternParser(self.config)
        self.logger = get_logger(__name__, correlation_id, "path_resolver")

    def resolve(self, root: XMLTag, pattern: str) -> XMLTag:
        """Resolve ``pattern`` starting at ``root``.

        Args:
            root: Tag the pattern is relative to
            pattern: Separator-delimited steps

        Returns:
            The matched tag, or for an attribute step a tag whose only
            populated field is ``content``

        Raises:
            EmptyTreeError: If ``root`` is the zero tag
            AttributeNotFoundError: If an attribute step does not match
            InvalidIndexFormatError: If an index step is not an integer
            IndexOutOfRangeError: If an index step is outside the children
            TagNotFoundError: If a name step matches no child
        """
        if not root.name:
            raise EmptyTreeError()

        steps = self.parser.split(pattern)
        self.logger.debug(
            "Resolving pattern",
            extra={"pattern": pattern, "step_count": len(steps), "root_tag": root.name}
        )
        return self._resolve_steps(root, steps)

    def find(self, root: XMLTag, pattern: str) -> XMLTag:
        """Resolve ``pattern``, returning ``XMLTag()`` on any failure."""
        try:
            return self.resolve(root, pattern)
        except QueryError as e:
            self.logger.debug(
                "Pattern not resolved",
                extra={
                    "pattern": pattern,
                    "error": str(e),
                    "error_type": type(e).__name__,
                }
            )
            return XMLTag()

    def _resolve_steps(self, tag: XMLTag, steps: List[str]) -> XMLTag:
        last = len(steps) - 1
        for position, raw in enumerate(steps):
            # An empty last step (empty pattern, doubled trailing separator)
            # selects the current tag.
            if not raw and position == last:
                break
            tag = self._resolve_step(tag, self.parser.classify(raw))
        return tag

    def _resolve_step(self, tag: XMLTag, step: PatternStep) -> XMLTag:
        if step.kind is StepKind.ATTRIBUTE:
            if step.value not in tag.attributes:
                raise AttributeNotFoundError(step.value)
            # Steps after an attribute run against this scalar tag and fail.
            return XMLTag(content=tag.attributes[step.value])

        if step.kind is StepKind.INDEX:
            index = step.index
            if 0 <= index < len(tag.children):
                return tag.children[index]
            raise IndexOutOfRangeError(index)

        for child in tag.children:
            if child.name == step.value:
                return child
        raise TagNotFoundError(step.value)


_default_resolver = PathResolver()


def resolve(root: XMLTag, pattern: str) -> XMLTag:
    """Resolve ``pattern`` from ``root`` with the default resolver, raising on failure."""
    return _default_resolver.resolve(root, pattern)


def find(root: XMLTag, pattern: str) -> XMLTag:
    """Resolve ``pattern`` from ``root``, returning ``XMLTag()`` on failure."""
    return _default_resolver.find(root, pattern)
