"""Tests for the configuration system."""

import json

import pytest

from xmpeek.shared.config import (
    ConfigError,
    ConfigValidationError,
    GlobalConfig,
    TreeConfig,
    XmlParserConfig,
    XmpeekConfig,
)


class TestXmlParserConfig:
    """Test suite for XmlParserConfig."""

    def test_default_configuration(self):
        """Test default parser settings are the secure ones."""
        config = XmlParserConfig()

        assert config.huge_tree is True
        assert config.resolve_entities is False
        assert config.no_network is True
        assert config.remove_comments is False

    def test_non_boolean_flag_rejected(self):
        """Test flag type validation."""
        with pytest.raises(ValueError, match="huge_tree must be a boolean"):
            XmlParserConfig(huge_tree="yes")  # type: ignore[arg-type]


class TestTreeConfig:
    """Test suite for TreeConfig."""

    def test_default_configuration(self):
        """Test default tree settings."""
        config = TreeConfig()

        assert config.qualified_names is False
        assert config.max_text_preview == 80

    def test_invalid_preview_length(self):
        """Test preview length validation."""
        with pytest.raises(ValueError, match="max_text_preview must be > 0"):
            TreeConfig(max_text_preview=0)


class TestGlobalConfig:
    """Test suite for GlobalConfig."""

    def test_default_configuration(self):
        config = GlobalConfig()

        assert config.logging_level == "WARNING"
        assert config.enable_correlation_tracking is True

    def test_invalid_logging_level(self):
        with pytest.raises(ValueError, match="logging_level must be one of"):
            GlobalConfig(logging_level="VERBOSE")


class TestXmpeekConfig:
    """Test suite for the top-level configuration."""

    def test_default_components(self):
        """Test default construction."""
        config = XmpeekConfig()

        assert config.xml == XmlParserConfig()
        assert config.tree == TreeConfig()
        assert config.global_ == GlobalConfig()
        assert config.name is None

    def test_config_is_frozen(self):
        """Test immutability of the top-level configuration."""
        config = XmpeekConfig()

        with pytest.raises(AttributeError):
            config.name = "changed"  # type: ignore[misc]

    def test_huge_tree_with_entities_rejected(self):
        """Test cross-component validation."""
        with pytest.raises(ConfigValidationError) as exc_info:
            XmpeekConfig(xml=XmlParserConfig(huge_tree=True, resolve_entities=True))

        assert exc_info.value.field_name == "xml.resolve_entities"
        assert exc_info.value.suggestions
        assert isinstance(exc_info.value, ConfigError)

    def test_presets(self):
        """Test preset factory methods."""
        assert XmpeekConfig.default().name == "default"
        assert XmpeekConfig.strict_limits().xml.huge_tree is False
        assert XmpeekConfig.namespace_aware().tree.qualified_names is True

    def test_override_component_fields(self):
        """Test double-underscore overrides."""
        config = XmpeekConfig()

        new_config = config.override(
            xml__huge_tree=False,
            tree__qualified_names=True,
            global___logging_level="DEBUG",
            name="custom",
        )

        assert new_config.xml.huge_tree is False
        assert new_config.tree.qualified_names is True
        assert new_config.global_.logging_level == "DEBUG"
        assert new_config.name == "custom"
        # Original untouched
        assert config.xml.huge_tree is True
        assert config.global_.logging_level == "WARNING"

    def test_override_unknown_component(self):
        with pytest.raises(ConfigValidationError, match="Unknown configuration component"):
            XmpeekConfig().override(parser__huge_tree=True)

    def test_override_invalid_value(self):
        with pytest.raises(ConfigValidationError, match="max_text_preview must be > 0"):
            XmpeekConfig().override(tree__max_text_preview=0)

    def test_override_unknown_field(self):
        with pytest.raises(ConfigValidationError):
            XmpeekConfig().override(tree__bogus=1)

    def test_override_cross_component_violation(self):
        with pytest.raises(ConfigValidationError):
            XmpeekConfig().override(xml__huge_tree=True, xml__resolve_entities=True)

    def test_to_dict(self):
        data = XmpeekConfig.namespace_aware().to_dict()

        assert data["name"] == "namespace_aware"
        assert data["tree"] == {"qualified_names": True, "max_text_preview": 80}
        assert data["xml"]["no_network"] is True
        assert data["global_"]["logging_level"] == "WARNING"

    def test_json_round_trip(self):
        config = XmpeekConfig().override(xml__huge_tree=False, tree__max_text_preview=40)

        restored = XmpeekConfig.from_json(config.to_json())

        assert restored == config
        assert json.loads(config.to_json())["tree"]["max_text_preview"] == 40

    def test_from_dict_partial(self):
        """Test that omitted sections keep defaults."""
        config = XmpeekConfig.from_dict({"tree": {"qualified_names": True}})

        assert config.tree.qualified_names is True
        assert config.xml == XmlParserConfig()

    def test_from_dict_unknown_key(self):
        with pytest.raises(ConfigValidationError, match="Unknown configuration key") as exc_info:
            XmpeekConfig.from_dict({"trees": {}})

        assert exc_info.value.field_name == "trees"

    def test_from_dict_invalid_section(self):
        with pytest.raises(ConfigValidationError, match="must be a mapping"):
            XmpeekConfig.from_dict({"tree": True})

    def test_from_dict_invalid_value(self):
        with pytest.raises(ConfigValidationError, match="logging_level must be one of"):
            XmpeekConfig.from_dict({"global_": {"logging_level": "LOUD"}})

    def test_from_json_invalid(self):
        with pytest.raises(ConfigValidationError, match="Invalid configuration JSON"):
            XmpeekConfig.from_json("{not json")

    def test_from_json_not_a_mapping(self):
        with pytest.raises(ConfigValidationError, match="must be a mapping"):
            XmpeekConfig.from_json("[1, 2]")
