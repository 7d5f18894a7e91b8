"""Configuration classes for XMP packet loading.

This module provides configuration objects for the XML parsing step, the
tree building step and process-wide settings, plus an immutable top-level
configuration that can be overridden and serialized to JSON.
"""

import json
from dataclasses import dataclass, field, fields, is_dataclass, replace
from typing import Any, Dict, List, Optional

_LOGGING_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
_COMPONENTS = ["xml", "tree", "global_"]


@dataclass
class XmlParserConfig:
    """Configuration for the lxml parser applied to the packet text."""

    huge_tree: bool = True            # Lift libxml2 depth and size limits
    resolve_entities: bool = False
    no_network: bool = True
    remove_comments: bool = False

    def __post_init__(self) -> None:
        """Validate parser configuration."""
        for name in ("huge_tree", "resolve_entities", "no_network", "remove_comments"):
            if not isinstance(getattr(self, name), bool):
                raise ValueError(f"{name} must be a boolean")


@dataclass
class TreeConfig:
    """Configuration for tree building and text rendering."""

    qualified_names: bool = False
    max_text_preview: int = 80

    def __post_init__(self) -> None:
        """Validate tree configuration."""
        if not isinstance(self.qualified_names, bool):
            raise ValueError("qualified_names must be a boolean")
        if self.max_text_preview <= 0:
            raise ValueError("max_text_preview must be > 0")


@dataclass
class GlobalConfig:
    """Settings that apply across all loading stages."""

    logging_level: str = "WARNING"
    enable_correlation_tracking: bool = True

    def __post_init__(self) -> None:
        """Validate global configuration."""
        if self.logging_level not in _LOGGING_LEVELS:
            raise ValueError(f"logging_level must be one of {_LOGGING_LEVELS}")


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
class XmpeekConfig:
    """Immutable configuration for the whole loading pipeline.

    Component configurations validate themselves; any ValueError they raise
    is reported as ConfigValidationError.
    """

    xml: XmlParserConfig = field(default_factory=XmlParserConfig)
    tree: TreeConfig = field(default_factory=TreeConfig)
    global_: GlobalConfig = field(default_factory=GlobalConfig)

    name: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the complete configuration."""
        try:
            self.xml.__post_init__()
            self.tree.__post_init__()
            self.global_.__post_init__()
        except ValueError as e:
            raise ConfigValidationError(str(e)) from e

        # Entity expansion without libxml2's size limits allows entity bombs
        if self.xml.huge_tree and self.xml.resolve_entities:
            raise ConfigValidationError(
                "huge_tree cannot be combined with resolve_entities",
                field_name="xml.resolve_entities",
                suggestions=["Disable xml.resolve_entities", "Disable xml.huge_tree"],
            )

    def override(self, **kwargs: Any) -> "XmpeekConfig":
        """Create a new configuration with specific overrides.

        Args:
            **kwargs: Fields to override, ``component__field`` for component
                settings (e.g. ``tree__qualified_names=True``)

        Returns:
            New XmpeekConfig instance with overrides applied

        Example:
            >>> config = XmpeekConfig().override(xml__huge_tree=False)
            >>> config.xml.huge_tree
            False
        """
        nested: Dict[str, Dict[str, Any]] = {}
        top_level: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if "__" not in key:
                top_level[key] = value
                continue
            # "global_" ends in an underscore, so match on the full prefix
            component = next((c for c in _COMPONENTS if key.startswith(c + "__")), None)
            if component is None:
                raise ConfigValidationError(
                    f"Unknown configuration component: {key.split('__', 1)[0]}",
                    field_name=key,
                    suggestions=[f"Use one of {_COMPONENTS}"],
                )
            nested.setdefault(component, {})[key[len(component) + 2:]] = value

        new_fields: Dict[str, Any] = {}
        for component, values in nested.items():
            try:
                new_fields[component] = replace(getattr(self, component), **values)
            except (TypeError, ValueError) as e:
                raise ConfigValidationError(str(e), field_name=component) from e
        new_fields.update(top_level)

        return replace(self, **new_fields)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        def _convert(obj: Any) -> Any:
            if is_dataclass(obj):
                return {f.name: _convert(getattr(obj, f.name)) for f in fields(obj)}
            return obj

        return _convert(self)

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "XmpeekConfig":
        """Create configuration from dictionary.

        Unknown keys are rejected so that typos in config files surface.
        """
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration data must be a mapping")

        component_types = {
            "xml": XmlParserConfig,
            "tree": TreeConfig,
            "global_": GlobalConfig,
        }
        values: Dict[str, Any] = {}
        for key, value in data.items():
            if key in component_types:
                target = component_types[key]
                if not isinstance(value, dict):
                    raise ConfigValidationError(
                        f"Section '{key}' must be a mapping", field_name=key
                    )
                try:
                    values[key] = target(**value)
                except (TypeError, ValueError) as e:
                    raise ConfigValidationError(str(e), field_name=key) from e
            elif key == "name":
                values[key] = value
            else:
                raise ConfigValidationError(
                    f"Unknown configuration key: {key}",
                    field_name=key,
                    suggestions=[f"Use one of {_COMPONENTS + ['name']}"],
                )

        return cls(**values)

    @classmethod
    def from_json(cls, json_str: str) -> "XmpeekConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid configuration JSON: {e}") from e
        return cls.from_dict(data)

    # Preset factory methods
    @classmethod
    def default(cls) -> "XmpeekConfig":
        """Create the default configuration."""
        return cls(name="default")

    @classmethod
    def strict_limits(cls) -> "XmpeekConfig":
        """Create preset that keeps libxml2's default depth and size limits."""
        return cls(xml=XmlParserConfig(huge_tree=False), name="strict_limits")

    @classmethod
    def namespace_aware(cls) -> "XmpeekConfig":
        """Create preset that keeps namespace prefixes in names."""
        return cls(tree=TreeConfig(qualified_names=True), name="namespace_aware")
