"""Configuration classes for XML node tree construction and queries.

This module provides configuration objects for the token source, the tree
builder, query delimiters and global behaviour, with validation, presets and
JSON round-tripping.
"""

import json
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

from xmlx.shared.errors import XMLNodeError

_COMPONENTS = ("source", "builder", "query", "global_")


@dataclass
class SourceConfig:
    """Configuration for the lxml-backed token source."""

    chunk_size: int = 65536
    resolve_entities: bool = False
    huge_tree: bool = False

    def __post_init__(self) -> None:
        """Validate source configuration."""
        if self.chunk_size <= 0:
            raise ValueError("chunk_size must be > 0")


@dataclass
class BuilderConfig:
    """Configuration for tree construction."""

    tolerate_truncation: bool = True
    max_depth: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate builder configuration."""
        if self.max_depth is not None and self.max_depth <= 0:
            raise ValueError("max_depth must be > 0 or None")


@dataclass
class QueryConfig:
    """Delimiters used when paths and split labels arrive as single strings."""

    path_delimiter: str = "/"
    split_delimiter: str = "."

    def __post_init__(self) -> None:
        """Validate query configuration."""
        if not self.path_delimiter:
            raise ValueError("path_delimiter cannot be empty")
        if not self.split_delimiter:
            raise ValueError("split_delimiter cannot be empty")


@dataclass
class GlobalConfig:
    """Global configuration settings that apply across all components."""

    logging_level: str = "WARNING"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    enable_correlation_tracking: bool = True

    def __post_init__(self) -> None:
        """Validate global configuration."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if self.logging_level not in valid_levels:
            raise ValueError(f"logging_level must be one of {valid_levels}")


class ConfigError(XMLNodeError):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass(frozen=True)
class XMLNodeConfig:
    """Complete configuration for parsing documents into node trees.

    Immutable, so a single instance can be shared between parsers and threads.
    """

    source: SourceConfig = field(default_factory=SourceConfig)
    builder: BuilderConfig = field(default_factory=BuilderConfig)
    query: QueryConfig = field(default_factory=QueryConfig)
    global_: GlobalConfig = field(default_factory=GlobalConfig)

    name: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the complete configuration."""
        try:
            self.source.__post_init__()
            self.builder.__post_init__()
            self.query.__post_init__()
            self.global_.__post_init__()
        except ValueError as e:
            raise ConfigValidationError(str(e)) from e

        if self.query.path_delimiter == self.query.split_delimiter:
            raise ConfigValidationError(
                "path_delimiter and split_delimiter must differ",
                field_name="query",
                suggestions=["Use '/' for paths and '.' for split labels"],
            )

    def override(self, **kwargs: Any) -> "XMLNodeConfig":
        """Create a new configuration with specific overrides.

        Args:
            **kwargs: Fields to override, nested with a double underscore

        Returns:
            New XMLNodeConfig instance with overrides applied

        Example:
            >>> config = XMLNodeConfig()
            >>> strict = config.override(builder__tolerate_truncation=False)
        """
        nested_overrides: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if "__" in key:
                component, field_name = key.split("__", 1)
                # "global" is a keyword, so the field is global_
                if component == "global":
                    component = "global_"
                if component not in _COMPONENTS:
                    raise ConfigValidationError(
                        f"Unknown configuration component: {component}",
                        field_name=key,
                        suggestions=list(_COMPONENTS),
                    )
                nested_overrides.setdefault(component, {})[field_name] = value
            else:
                nested_overrides[key] = value

        new_fields: Dict[str, Any] = {}
        for key, value in nested_overrides.items():
            if key in _COMPONENTS and isinstance(value, dict):
                try:
                    new_fields[key] = replace(getattr(self, key), **value)
                except (TypeError, ValueError) as e:
                    raise ConfigValidationError(str(e), field_name=key) from e
            else:
                new_fields[key] = value

        return replace(self, **new_fields)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        def _dataclass_to_dict(obj: Any) -> Any:
            if hasattr(obj, "__dataclass_fields__"):
                return {
                    name: _dataclass_to_dict(getattr(obj, name))
                    for name in obj.__dataclass_fields__
                }
            return obj

        return _dataclass_to_dict(self)

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "XMLNodeConfig":
        """Create configuration from dictionary.

        Unknown keys are rejected so that typos in configuration files surface.
        """
        field_values: Dict[str, Any] = {}
        for key, value in data.items():
            if key not in cls.__dataclass_fields__:
                raise ConfigValidationError(
                    f"Unknown configuration field: {key}", field_name=key
                )
            field_type = cls.__dataclass_fields__[key].type
            if hasattr(field_type, "__dataclass_fields__"):
                try:
                    field_values[key] = field_type(**value)
                except (TypeError, ValueError) as e:
                    raise ConfigValidationError(str(e), field_name=key) from e
            else:
                field_values[key] = value

        return cls(**field_values)

    @classmethod
    def from_json(cls, json_str: str) -> "XMLNodeConfig":
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
    def default(cls) -> "XMLNodeConfig":
        """Tolerant defaults: truncated documents yield partial trees."""
        return cls(name="default")

    @classmethod
    def strict(cls) -> "XMLNodeConfig":
        """Preset that rejects truncated documents."""
        return cls(
            builder=BuilderConfig(tolerate_truncation=False),
            name="strict",
            description="Truncated documents raise TruncatedInputError",
        )

    @classmethod
    def lenient(cls) -> "XMLNodeConfig":
        """Preset for very large or deeply nested documents."""
        return cls(
            source=SourceConfig(huge_tree=True),
            builder=BuilderConfig(tolerate_truncation=True, max_depth=None),
            name="lenient",
            description="Lifts libxml2 size limits and tolerates truncation",
        )

    @classmethod
    def preset(cls, name: str) -> "XMLNodeConfig":
        """Look up a preset by name."""
        presets = {"default": cls.default, "strict": cls.strict, "lenient": cls.lenient}
        if name not in presets:
            raise ConfigValidationError(
                f"Unknown preset: {name}", suggestions=sorted(presets)
            )
        return presets[name]()
