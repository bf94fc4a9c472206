"""Composer configuration.

ComposerConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass

from burrow.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class ComposerConfig:
    """Route composition settings. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = ComposerConfig(extensions=(".pyc", ".py"), error_handler_export="handle_error")
    """

    # Discovery
    # Candidate suffixes in priority order: when ``users.py`` and ``users.pyc``
    # both exist, the suffix listed first wins.
    extensions: tuple[str, ...] = (".py", ".pyc")
    index_name: str = "index"  # Stem that maps to its directory URL
    ignore_patterns: tuple[str, ...] = ("test_*", "*_test", "*.test", "*.spec", "conftest")

    # Loading
    error_handler_export: str = "on_error"

    def __post_init__(self) -> None:
        if not self.extensions:
            msg = "ComposerConfig.extensions must list at least one file suffix."
            raise ConfigurationError(msg)
        for ext in self.extensions:
            if not ext.startswith(".") or len(ext) < 2:
                msg = f"Invalid extension {ext!r}: suffixes must look like '.py'."
                raise ConfigurationError(msg)
        if len(set(self.extensions)) != len(self.extensions):
            msg = f"Duplicate suffix in ComposerConfig.extensions: {self.extensions!r}"
            raise ConfigurationError(msg)
        if not self.index_name:
            msg = "ComposerConfig.index_name must not be empty."
            raise ConfigurationError(msg)
        if not self.error_handler_export.isidentifier():
            msg = f"Invalid error handler export name: {self.error_handler_export!r}"
            raise ConfigurationError(msg)
