"""
gamelistsync - ES-DE gamelist & artwork synchronizer

Copies per-platform gamelist.xml files and their downloaded artwork from an
ES-DE style library into a front-end layout with media/image and
media/thumbnail folders, rewriting the media references as it goes.
"""

__version__ = "0.3.0"
