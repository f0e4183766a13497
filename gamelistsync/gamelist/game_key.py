"""
Game key derivation.

Artwork in downloaded_media is named after the ROM file without its
extension, so the key is the last path segment minus its extension.
"""

import os
from typing import Optional


def derive_game_key(rom_path: Optional[str]) -> Optional[str]:
    """
    Derive the artwork lookup key from a gamelist <path> value.

    Args:
        rom_path: Text of the <path> element

    Returns:
        Game key, or None for an empty path

    Examples:
        - "/roms/n3ds/Mario.zip" -> "Mario"
        - "./foo.bar.zip" -> "foo.bar"
        - "game.gba" -> "game"
        - "   " -> None
    """
    if rom_path is None:
        return None

    path = rom_path.strip()
    if not path:
        return None

    filename = path.rsplit('/', 1)[-1]
    stem, _extension = os.path.splitext(filename)
    return stem or None
