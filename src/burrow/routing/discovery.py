"""Filesystem route discovery for a mount directory.

Walks a directory tree and turns every candidate handler module into a
:class:`DiscoveredRoute`:

- ``index.py`` maps to its directory URL; other modules append their stem.
- Directory and file names wrapped in ``[brackets]`` become ``:name``
  path parameters.
- Hidden (``.``) and private (``_``) entries are skipped, as are test
  modules matching ``ComposerConfig.ignore_patterns``.

When the same route exists under several suffixes (``users.py`` and
``users.pyc``), the suffix listed first in ``ComposerConfig.extensions``
wins and the others are dropped.
"""

from __future__ import annotations

import logging
import re
from fnmatch import fnmatchcase
from pathlib import Path, PurePosixPath

from burrow.config import ComposerConfig
from burrow.errors import InvalidSegmentError, MissingMountDirectoryError
from burrow.routing.types import DiscoveredRoute

logger = logging.getLogger("burrow.routing")

# Literal URL segments
_SEGMENT_RE = re.compile(r"^[A-Za-z0-9_-]+$")

# [param] segments
_PARAM_RE = re.compile(r"^\[([A-Za-z0-9_]+)\]$")


def discover_routes(
    root_directory: str | Path,
    *,
    config: ComposerConfig | None = None,
) -> list[DiscoveredRoute]:
    """Walk a mount directory and discover all candidate routes.

    Args:
        root_directory: Path to the mount root.
        config: Discovery settings. Defaults to ``ComposerConfig()``.

    Returns:
        Discovered routes. Order is not significant; see
        :func:`burrow.routing.specificity.sort_routes`.

    Raises:
        MissingMountDirectoryError: If the root is not a directory.
        InvalidSegmentError: If any path segment cannot become a URL segment.
    """
    config = config or ComposerConfig()
    root = Path(root_directory).resolve()
    if not root.is_dir():
        raise MissingMountDirectoryError(root)

    # (directory, stem) -> (priority, file); lower priority wins
    candidates: dict[tuple[Path, str], tuple[int, Path]] = {}
    _walk_directory(root, config=config, candidates=candidates)

    routes: list[DiscoveredRoute] = []
    for _, file in sorted(candidates.values(), key=lambda c: c[1]):
        relative_path = file.relative_to(root).as_posix()
        routes.append(
            DiscoveredRoute(
                relative_path=relative_path,
                url_path=file_path_to_url_path(
                    relative_path,
                    index_name=config.index_name,
                    extensions=config.extensions,
                ),
                absolute_path=file,
            )
        )
        logger.debug("Discovered %s -> %s", relative_path, routes[-1].url_path)
    return routes


def _walk_directory(
    directory: Path,
    *,
    config: ComposerConfig,
    candidates: dict[tuple[Path, str], tuple[int, Path]],
) -> None:
    """Recursively collect candidate files, resolving suffix priority per stem."""
    for item in sorted(directory.iterdir()):
        if item.name.startswith((".", "_")):
            continue

        if item.is_dir():
            _walk_directory(item, config=config, candidates=candidates)
            continue

        if not item.is_file() or not _is_candidate(item, config):
            continue

        suffix = _matching_suffix(item.name, config.extensions)
        priority = config.extensions.index(suffix)
        key = (item.parent, item.name[: -len(suffix)])
        current = candidates.get(key)
        if current is None or priority < current[0]:
            if current is not None:
                logger.debug("Dropping %s in favour of %s", current[1], item)
            candidates[key] = (priority, item)
        else:
            logger.debug("Dropping %s in favour of %s", item, current[1])


def _matching_suffix(name: str, extensions: tuple[str, ...]) -> str:
    """Longest configured suffix ``name`` ends with, or ``""``."""
    matches = [ext for ext in extensions if name.endswith(ext) and len(name) > len(ext)]
    return max(matches, key=len, default="")


def _is_candidate(file: Path, config: ComposerConfig) -> bool:
    suffix = _matching_suffix(file.name, config.extensions)
    if not suffix:
        return False
    stem = file.name[: -len(suffix)]
    return not any(fnmatchcase(stem, pattern) for pattern in config.ignore_patterns)


def file_path_to_url_path(
    relative_path: str,
    *,
    index_name: str = "index",
    extensions: tuple[str, ...] = (".py", ".pyc"),
) -> str:
    """Translate a mount-relative module path into a URL pattern.

    Examples::

        "index.py"            -> "/"
        "users/index.py"      -> "/users"
        "users/[id].py"       -> "/users/:id"
        "[org]/repos/index.py" -> "/:org/repos"

    Raises:
        InvalidSegmentError: If a segment is neither a literal matching
            ``[A-Za-z0-9_-]+`` nor a ``[name]`` parameter.
    """
    parts = list(PurePosixPath(relative_path).parts)
    if parts:
        suffix = _matching_suffix(parts[-1], extensions)
        if suffix:
            parts[-1] = parts[-1][: -len(suffix)]

    url_segments: list[str] = []
    for part in parts:
        # The index marker never reaches the URL, at any depth
        if part == index_name:
            continue
        param_match = _PARAM_RE.match(part)
        if param_match:
            url_segments.append(":" + param_match.group(1))
            continue
        if not _SEGMENT_RE.match(part):
            raise InvalidSegmentError(part, relative_path)
        url_segments.append(part)

    return "/" + "/".join(url_segments)
