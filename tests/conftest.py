"""Shared fixtures: build throwaway route trees on disk."""

import textwrap
from collections.abc import Callable
from pathlib import Path
from typing import TypeAlias

import pytest

TreeFactory: TypeAlias = Callable[[Path, dict[str, str]], Path]


def write_tree(root: Path, files: dict[str, str]) -> Path:
    """Write ``{relative_path: source}`` under *root* and return *root*."""
    root.mkdir(parents=True, exist_ok=True)
    for relative, source in files.items():
        target = root / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(textwrap.dedent(source).lstrip(), encoding="utf-8")
    return root


@pytest.fixture
def make_tree() -> TreeFactory:
    return write_tree
