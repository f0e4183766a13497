"""Tests for ArtworkSyncer."""

import pytest

from gamelistsync.media.artwork_syncer import ArtworkSyncer, CHUNK_SIZE
from gamelistsync.storage.handles import LocalNode


@pytest.fixture
def dirs(tmp_path):
    source = tmp_path / "covers"
    dest = tmp_path / "thumbnail"
    source.mkdir()
    dest.mkdir()
    return source, dest


@pytest.mark.unit
def test_copy_asset_returns_reference(dirs):
    source, dest = dirs
    (source / "Mario.png").write_bytes(b"PNGDATA")

    ref = ArtworkSyncer().copy_asset(
        LocalNode(source / "Mario.png"), LocalNode(dest), "thumbnail"
    )

    assert ref == "./media/thumbnail/Mario.png"
    assert (dest / "Mario.png").read_bytes() == b"PNGDATA"


@pytest.mark.unit
def test_copy_asset_replaces_existing(dirs):
    source, dest = dirs
    (source / "Mario.png").write_bytes(b"new")
    (dest / "Mario.png").write_bytes(b"old content")

    ref = ArtworkSyncer().copy_asset(
        LocalNode(source / "Mario.png"), LocalNode(dest), "thumbnail"
    )

    assert ref is not None
    assert (dest / "Mario.png").read_bytes() == b"new"


@pytest.mark.unit
def test_copy_asset_large_file_in_chunks(dirs):
    source, dest = dirs
    data = bytes(range(256)) * ((CHUNK_SIZE * 3) // 256 + 7)
    (source / "Big.jpg").write_bytes(data)

    ref = ArtworkSyncer().copy_asset(LocalNode(source / "Big.jpg"), LocalNode(dest), "image")

    assert ref == "./media/image/Big.jpg"
    assert (dest / "Big.jpg").read_bytes() == data


@pytest.mark.unit
def test_copy_asset_empty_source_fails_and_cleans_up(dirs):
    source, dest = dirs
    (source / "Empty.png").write_bytes(b"")

    ref = ArtworkSyncer().copy_asset(LocalNode(source / "Empty.png"), LocalNode(dest), "thumbnail")

    assert ref is None
    assert not (dest / "Empty.png").exists()


@pytest.mark.unit
def test_copy_asset_unreadable_source_fails(dirs):
    source, dest = dirs

    # Source handle points at a file that no longer exists
    ref = ArtworkSyncer().copy_asset(LocalNode(source / "Gone.png"), LocalNode(dest), "thumbnail")

    assert ref is None
    assert not (dest / "Gone.png").exists()


@pytest.mark.unit
def test_copy_asset_create_failure(dirs):
    source, dest = dirs
    (source / "Mario.png").write_bytes(b"x")

    class NoCreateDir:
        name = "thumbnail"

        def find(self, name):
            return None

        def create_file(self, mime_type, name):
            return None

    assert ArtworkSyncer().copy_asset(LocalNode(source / "Mario.png"), NoCreateDir(), "thumbnail") is None
