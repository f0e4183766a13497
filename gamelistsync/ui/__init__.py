"""
UI package for gamelistsync.

Progress events, the event bus and the headless console logger.
"""
