"""
Gamelist package for gamelistsync.

Handles streaming transformation of ES-DE gamelist.xml files.
"""

from .game_key import derive_game_key
from .transformer import GamelistTransformer

__all__ = [
    'derive_game_key',
    'GamelistTransformer',
]
