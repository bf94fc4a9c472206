"""Tests for burrow.config — ComposerConfig defaults and validation."""

import dataclasses

import pytest

from burrow.config import ComposerConfig
from burrow.errors import ConfigurationError


class TestDefaults:
    def test_defaults(self) -> None:
        config = ComposerConfig()
        assert config.extensions == (".py", ".pyc")
        assert config.index_name == "index"
        assert config.error_handler_export == "on_error"
        assert "test_*" in config.ignore_patterns

    def test_frozen(self) -> None:
        config = ComposerConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.index_name = "home"  # type: ignore[misc]

    def test_override(self) -> None:
        config = ComposerConfig(extensions=(".pyc", ".py"), index_name="home")
        assert config.extensions == (".pyc", ".py")
        assert config.index_name == "home"


class TestValidation:
    def test_empty_extensions(self) -> None:
        with pytest.raises(ConfigurationError):
            ComposerConfig(extensions=())

    @pytest.mark.parametrize("ext", ["py", ".", ""])
    def test_malformed_extension(self, ext: str) -> None:
        with pytest.raises(ConfigurationError):
            ComposerConfig(extensions=(ext,))

    def test_duplicate_extension(self) -> None:
        with pytest.raises(ConfigurationError, match="Duplicate"):
            ComposerConfig(extensions=(".py", ".py"))

    def test_empty_index_name(self) -> None:
        with pytest.raises(ConfigurationError):
            ComposerConfig(index_name="")

    def test_error_export_must_be_identifier(self) -> None:
        with pytest.raises(ConfigurationError):
            ComposerConfig(error_handler_export="on-error")
