"""Tests for PlatformSynchronizer."""

import pytest
from lxml import etree

from gamelistsync.storage.handles import LocalNode
from gamelistsync.workflow.platform_sync import PlatformSynchronizer


def _sync(library, platform, media=True, **kwargs):
    synchronizer = PlatformSynchronizer(**kwargs)
    media_root = LocalNode(library.source / "downloaded_media") if media else None
    return synchronizer.sync_platform(
        LocalNode(library.source / "gamelists" / platform),
        library.dest_node,
        media_root
    )


def _game_media(gamelist_path, rom):
    root = etree.parse(str(gamelist_path)).getroot()
    for game in root.findall("game"):
        if game.findtext("path") == rom:
            return [(child.tag, child.text) for child in game if child.tag in ("thumbnail", "image")]
    raise AssertionError(f"{rom} not in {gamelist_path}")


@pytest.mark.integration
def test_cover_and_fanart(library):
    library.add_gamelist("n3ds")
    library.add_artwork("n3ds", "covers", "Mario.png", b"cover")
    library.add_artwork("n3ds", "fanart", "Mario.jpg", b"fanart")

    result = _sync(library, "n3ds")

    assert result.status == "synced"
    assert result.games_processed == 2
    assert result.thumbnails_copied == 1
    assert result.images_copied == 1
    assert result.games_without_media == 1
    assert (library.dest_media("n3ds", "thumbnail") / "Mario.png").read_bytes() == b"cover"
    assert (library.dest_media("n3ds", "image") / "Mario.jpg").read_bytes() == b"fanart"
    assert _game_media(library.dest_gamelist("n3ds"), "./Mario.zip") == [
        ("thumbnail", "./media/thumbnail/Mario.png"),
        ("image", "./media/image/Mario.jpg"),
    ]
    assert _game_media(library.dest_gamelist("n3ds"), "./Zelda.zip") == []


@pytest.mark.integration
def test_screenshot_fallback(library):
    library.add_gamelist("n3ds")
    library.add_artwork("n3ds", "screenshots", "Zelda.png", b"shot")

    result = _sync(library, "n3ds")

    assert result.status == "synced"
    assert _game_media(library.dest_gamelist("n3ds"), "./Zelda.zip") == [
        ("image", "./media/image/Zelda.png"),
    ]
    assert list(library.dest_media("n3ds", "thumbnail").iterdir()) == []


@pytest.mark.integration
def test_missing_gamelist_skips_platform(library):
    library.add_gamelist("gba", content=None)

    result = _sync(library, "gba")

    assert result.status == "skipped"
    assert not (library.dest / "gba").exists()


@pytest.mark.integration
def test_copies_unchanged_without_media_root(library, n3ds_gamelist):
    library.add_gamelist("n3ds")

    result = _sync(library, "n3ds", media=False)

    assert result.status == "copied"
    assert library.dest_gamelist("n3ds").read_bytes() == n3ds_gamelist
    assert not (library.dest / "n3ds" / "media").exists()


@pytest.mark.integration
def test_copies_unchanged_without_platform_media(library, n3ds_gamelist):
    library.add_gamelist("n3ds")
    library.add_media_root()

    result = _sync(library, "n3ds")

    assert result.status == "copied"
    assert library.dest_gamelist("n3ds").read_bytes() == n3ds_gamelist


@pytest.mark.integration
def test_malformed_gamelist_copied_unmodified(library):
    broken = b"<gameList><game><path>./Mario.zip</path></gameList>"
    library.add_gamelist("n3ds", broken)
    library.add_artwork("n3ds", "covers", "Mario.png")

    result = _sync(library, "n3ds")

    assert result.status == "copied"
    assert library.dest_gamelist("n3ds").read_bytes() == broken
    assert "Gamelist transform failed; copied unmodified" in result.messages


@pytest.mark.integration
def test_stale_media_removed(library):
    library.add_gamelist("n3ds")
    library.add_artwork("n3ds", "covers", "Mario.png")
    stale = library.dest_media("n3ds", "image")
    stale.mkdir(parents=True)
    (stale / "Removed Game.png").write_bytes(b"old")

    result = _sync(library, "n3ds")

    assert result.stale_removed == 1
    assert not (stale / "Removed Game.png").exists()
    assert (library.dest_media("n3ds", "thumbnail") / "Mario.png").exists()


@pytest.mark.integration
def test_stale_media_removed_even_without_downloaded_media(library):
    library.add_gamelist("n3ds")
    stale = library.dest_media("n3ds", "thumbnail")
    stale.mkdir(parents=True)
    (stale / "Old.png").write_bytes(b"old")

    result = _sync(library, "n3ds", media=False)

    assert result.status == "copied"
    assert result.stale_removed == 1


@pytest.mark.integration
def test_existing_gamelist_replaced(library):
    library.add_gamelist("n3ds")
    library.add_artwork("n3ds", "covers", "Mario.png")
    (library.dest / "n3ds").mkdir()
    library.dest_gamelist("n3ds").write_bytes(b"<gameList><game><path>./Old.zip</path></game></gameList>")

    _sync(library, "n3ds")

    assert b"Old.zip" not in library.dest_gamelist("n3ds").read_bytes()


@pytest.mark.integration
def test_second_run_is_idempotent(library):
    library.add_gamelist("n3ds")
    library.add_artwork("n3ds", "covers", "Mario.png", b"cover-bytes")
    library.add_artwork("n3ds", "fanart", "Mario.jpg", b"fanart-bytes")
    thumbnail = library.dest_media("n3ds", "thumbnail") / "Mario.png"
    image = library.dest_media("n3ds", "image") / "Mario.jpg"

    _sync(library, "n3ds")
    first = library.dest_gamelist("n3ds").read_bytes()
    first_thumbnail = thumbnail.read_bytes()
    first_image = image.read_bytes()
    first_media = sorted(p.name for p in (library.dest / "n3ds" / "media").rglob("*"))

    _sync(library, "n3ds")

    assert library.dest_gamelist("n3ds").read_bytes() == first
    assert thumbnail.read_bytes() == first_thumbnail == b"cover-bytes"
    assert image.read_bytes() == first_image == b"fanart-bytes"
    assert sorted(p.name for p in (library.dest / "n3ds" / "media").rglob("*")) == first_media


@pytest.mark.integration
def test_destination_platform_is_a_file(library):
    library.add_gamelist("n3ds")
    (library.dest / "n3ds").write_text("not a directory")

    result = _sync(library, "n3ds")

    assert result.status == "failed"
    assert result.messages


@pytest.mark.integration
def test_replace_existing_media_option(library):
    library.add_gamelist("n3ds", b"<gameList><game><path>./Mario.zip</path>"
                                 b"<image>~/ES-DE/downloaded_media/n3ds/covers/Mario.png</image>"
                                 b"</game></gameList>")
    library.add_artwork("n3ds", "covers", "Mario.png")

    _sync(library, "n3ds", replace_existing_media=True)

    assert _game_media(library.dest_gamelist("n3ds"), "./Mario.zip") == [
        ("thumbnail", "./media/thumbnail/Mario.png"),
    ]


@pytest.mark.unit
def test_unexpected_error_is_captured(library):
    library.add_gamelist("n3ds")

    class ExplodingCleaner:
        def clear(self, platform_dir):
            raise RuntimeError("boom")

    synchronizer = PlatformSynchronizer(cleaner=ExplodingCleaner())
    result = synchronizer.sync_platform(
        LocalNode(library.source / "gamelists" / "n3ds"), library.dest_node, None
    )

    assert result.status == "failed"
    assert "Unexpected error: boom" in result.messages
    assert result.end_time is not None


@pytest.mark.integration
def test_default_namespace_gamelist_is_synced(library):
    library.add_gamelist("n3ds", b'<gameList xmlns="urn:gamelist"><game><path>./Mario.zip</path></game></gameList>')
    library.add_artwork("n3ds", "covers", "Mario.png", b"cover")

    result = _sync(library, "n3ds")

    assert result.status == "synced"
    assert result.thumbnails_copied == 1
    game = etree.parse(str(library.dest_gamelist("n3ds"))).getroot().find("{urn:gamelist}game")
    assert game.findtext("{urn:gamelist}thumbnail") == "./media/thumbnail/Mario.png"
