"""Tests for MediaLocator prefix matching."""

import pytest

from gamelistsync.media.locator import MediaLocator
from gamelistsync.storage.handles import LocalNode


class FakeNode:
    """In-memory node with a fixed listing order."""

    def __init__(self, name, children=None, is_file=True):
        self._name = name
        self._children = children or []
        self._is_file = is_file

    @property
    def name(self):
        return self._name

    def is_file(self):
        return self._is_file

    def is_directory(self):
        return not self._is_file

    def list_children(self):
        return list(self._children)


class UnlistableNode(FakeNode):
    def list_children(self):
        raise PermissionError("denied")


@pytest.mark.unit
def test_find_matches_prefix(tmp_path):
    (tmp_path / "Mario.png").write_bytes(b"x")
    (tmp_path / "Zelda.png").write_bytes(b"x")

    match = MediaLocator().find(LocalNode(tmp_path), "Mario")
    assert match is not None
    assert match.name == "Mario.png"


@pytest.mark.unit
def test_find_is_case_sensitive(tmp_path):
    (tmp_path / "mario.png").write_bytes(b"x")

    assert MediaLocator().find(LocalNode(tmp_path), "Mario") is None


@pytest.mark.unit
def test_find_none_directory():
    assert MediaLocator().find(None, "Mario") is None


@pytest.mark.unit
def test_find_skips_subdirectories():
    directory = FakeNode("covers", [
        FakeNode("Mario", is_file=False),
        FakeNode("Mario.png"),
    ], is_file=False)

    assert MediaLocator().find(directory, "Mario").name == "Mario.png"


@pytest.mark.unit
def test_find_uses_listing_order_by_default():
    directory = FakeNode("covers", [
        FakeNode("Mario Kart.png"),
        FakeNode("Mario.png"),
    ], is_file=False)

    assert MediaLocator().find(directory, "Mario").name == "Mario Kart.png"


@pytest.mark.unit
def test_find_deterministic_sorts_candidates():
    directory = FakeNode("covers", [
        FakeNode("Mario Kart.png"),
        FakeNode("Mario.png"),
    ], is_file=False)

    # ' ' sorts before '.'
    assert MediaLocator(deterministic=True).find(directory, "Mario").name == "Mario Kart.png"

    directory = FakeNode("covers", [
        FakeNode("Mario.png"),
        FakeNode("Mario-2.png"),
    ], is_file=False)
    assert MediaLocator(deterministic=True).find(directory, "Mario").name == "Mario-2.png"


@pytest.mark.unit
def test_find_listing_error_returns_none(caplog):
    directory = UnlistableNode("covers", is_file=False)

    assert MediaLocator().find(directory, "Mario") is None
    assert "Error listing covers" in caplog.text
