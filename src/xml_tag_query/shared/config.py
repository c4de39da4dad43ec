"""Configuration classes for tree building and path queries.

Component configurations validate themselves in ``__post_init__`` and are
aggregated by the immutable :class:`ParserConfig`.
"""

import json
from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, List, Optional

_COMPONENTS = ("tree", "query")


@dataclass
class TreeConfig:
    """Configuration for building the tag tree from tokens."""

    # Root-level children contribute "<name ...>content</name>" to the root
    # content instead of plain text.
    reconstruct_root_markup: bool = True
    # None leaves nesting depth unbounded.
    max_tree_depth: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate tree configuration."""
        if self.max_tree_depth is not None and self.max_tree_depth <= 0:
            raise ValueError("max_tree_depth must be > 0")


@dataclass
class QueryConfig:
    """Configuration for the pattern language."""

    separator: str = "/"
    attribute_marker: str = "@"
    index_open: str = "["
    index_close: str = "]"

    def __post_init__(self) -> None:
        """Validate query configuration."""
        markers = {
            "separator": self.separator,
            "attribute_marker": self.attribute_marker,
            "index_open": self.index_open,
            "index_close": self.index_close,
        }
        for field_name, value in markers.items():
            if not value:
                raise ValueError(f"{field_name} cannot be empty")
        if self.separator in (self.attribute_marker, self.index_open, self.index_close):
            raise ValueError("separator must differ from step markers")
        if self.attribute_marker in (self.index_open, self.index_close):
            raise ValueError("attribute_marker must differ from index brackets")


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass(frozen=True)
class ParserConfig:
    """Immutable configuration shared by the builder and the resolver.

    Being frozen, one instance can be handed to any number of parsers and
    resolvers running side by side.
    """

    tree: TreeConfig = field(default_factory=TreeConfig)
    query: QueryConfig = field(default_factory=QueryConfig)

    correlation_id: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the complete parser configuration."""
        for component in _COMPONENTS:
            value = getattr(self, component)
            try:
                value.__post_init__()
            except ValueError as e:
                raise ConfigValidationError(str(e), field_name=component) from e

    def override(self, **kwargs: Any) -> "ParserConfig":
        """Create a new configuration with specific overrides.

        Nested fields use ``component__field`` keys.

        Example:
            >>> config = ParserConfig().override(
            ...     tree__reconstruct_root_markup=False,
            ...     query__separator=".",
            ... )
        """
        nested: Dict[str, Dict[str, Any]] = {}
        top_level: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if "__" in key:
                component, field_name = key.split("__", 1)
                if component not in _COMPONENTS:
                    raise ConfigValidationError(
                        f"Unknown configuration component: {component}",
                        field_name=key,
                        suggestions=[f"{name}__{field_name}" for name in _COMPONENTS],
                    )
                nested.setdefault(component, {})[field_name] = value
            else:
                top_level[key] = value

        new_fields: Dict[str, Any] = dict(top_level)
        for component, overrides in nested.items():
            try:
                new_fields[component] = replace(getattr(self, component), **overrides)
            except (TypeError, ValueError) as e:
                raise ConfigValidationError(str(e), field_name=component) from e

        try:
            return replace(self, **new_fields)
        except TypeError as e:
            raise ConfigValidationError(str(e)) from e

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        result: Dict[str, Any] = {}
        for config_field in fields(self):
            value = getattr(self, config_field.name)
            if config_field.name in _COMPONENTS:
                value = {f.name: getattr(value, f.name) for f in fields(value)}
            result[config_field.name] = value
        return result

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParserConfig":
        """Create configuration from dictionary.

        Unknown keys are rejected so typos do not silently fall back to
        defaults.
        """
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigValidationError(
                f"Unknown configuration keys: {sorted(unknown)}",
                suggestions=sorted(known),
            )

        values: Dict[str, Any] = {}
        try:
            for key, value in data.items():
                if key == "tree":
                    values[key] = TreeConfig(**value)
                elif key == "query":
                    values[key] = QueryConfig(**value)
                else:
                    values[key] = value
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(str(e)) from e
        return cls(**values)

    @classmethod
    def from_json(cls, json_str: str) -> "ParserConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid configuration JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration JSON must be an object")
        return cls.from_dict(data)

    # Preset factory methods
    @classmethod
    def default(cls) -> "ParserConfig":
        """Configuration reproducing the historical content semantics."""
        return cls(name="default")

    @classmethod
    def plain_content(cls) -> "ParserConfig":
        """Configuration giving every level plain trimmed text content."""
        return cls(
            tree=TreeConfig(reconstruct_root_markup=False),
            name="plain_content",
            description="Root content holds only its own text, like every other tag",
        )
