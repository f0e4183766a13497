"""
Shared pytest fixtures and utilities for the gamelistsync test suite.
"""

from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Optional

import pytest
import yaml

from gamelistsync.storage.handles import LocalNode


N3DS_GAMELIST = b"""<?xml version="1.0"?>
<gameList>
  <game>
    <path>./Mario.zip</path>
    <name>Super Mario 3D Land</name>
  </game>
  <game>
    <path>./Zelda.zip</path>
    <name>Zelda</name>
  </game>
</gameList>
"""


def gamelist_for(paths: Iterable[str]) -> bytes:
    """Build a minimal gamelist document with one <game> per ROM path."""
    games = "".join(
        f"  <game>\n    <path>{path}</path>\n    <name>{path}</name>\n  </game>\n"
        for path in paths
    )
    return f'<?xml version="1.0"?>\n<gameList>\n{games}</gameList>\n'.encode('utf-8')


class LibraryBuilder:
    """
    Builds an ES-DE style source tree and an empty destination tree.

    Layout:
        <tmp>/source/gamelists/<platform>/gamelist.xml
        <tmp>/source/downloaded_media/<platform>/{covers,fanart,screenshots}/
        <tmp>/dest/
    """

    def __init__(self, base: Path):
        self.source = base / "source"
        self.dest = base / "dest"
        self.source.mkdir()
        self.dest.mkdir()
        (self.source / "gamelists").mkdir()

    def add_gamelist(self, platform: str, content: Optional[bytes] = N3DS_GAMELIST) -> Path:
        """Create gamelists/<platform>; write gamelist.xml unless content is None."""
        platform_dir = self.source / "gamelists" / platform
        platform_dir.mkdir(parents=True, exist_ok=True)
        gamelist = platform_dir / "gamelist.xml"
        if content is not None:
            gamelist.write_bytes(content)
        return gamelist

    def add_artwork(self, platform: str, category: str, filename: str, data: bytes = b"PNGDATA") -> Path:
        """Write downloaded_media/<platform>/<category>/<filename>."""
        directory = self.source / "downloaded_media" / platform / category
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / filename
        path.write_bytes(data)
        return path

    def add_media_root(self) -> Path:
        path = self.source / "downloaded_media"
        path.mkdir(exist_ok=True)
        return path

    def dest_media(self, platform: str, category: str) -> Path:
        return self.dest / platform / "media" / category

    def dest_gamelist(self, platform: str) -> Path:
        return self.dest / platform / "gamelist.xml"

    @property
    def source_node(self) -> LocalNode:
        return LocalNode(self.source)

    @property
    def dest_node(self) -> LocalNode:
        return LocalNode(self.dest)


@pytest.fixture
def library(tmp_path: Path) -> LibraryBuilder:
    """Empty source/destination library pair in a temp directory."""
    return LibraryBuilder(tmp_path)


@pytest.fixture
def make_gamelist() -> Callable[[Iterable[str]], bytes]:
    """Factory for gamelist documents; see gamelist_for()."""
    return gamelist_for


@pytest.fixture
def n3ds_gamelist() -> bytes:
    """Two-game gamelist (Mario.zip, Zelda.zip)."""
    return N3DS_GAMELIST


@pytest.fixture
def make_config(tmp_path: Path) -> Callable[[Dict[str, Any]], Path]:
    """
    Create a minimal config.yaml in a temp directory.

    Usage:
        path = make_config({"sync": {"platforms": ["n3ds"]}})
    """

    def _builder(overrides: Dict[str, Any] | None = None) -> Path:
        base = {
            "paths": {
                "source": str(tmp_path / "source"),
                "destination": str(tmp_path / "dest"),
            },
            "logging": {"console": False},
        }
        if overrides:
            base = merge_dicts(base, overrides)

        cfg_path = tmp_path / "config.yaml"
        cfg_path.write_text(yaml.safe_dump(base))
        return cfg_path

    return _builder


def merge_dicts(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge two dictionaries (override wins)."""
    result = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = merge_dicts(result[key], value)
        else:
            result[key] = value
    return result
