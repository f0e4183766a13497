"""
Storage package for gamelistsync.

Directory handle abstraction and path resolution helpers.
"""

from .handles import StorageNode, LocalNode
from .path_resolver import PathResolver

__all__ = [
    'StorageNode',
    'LocalNode',
    'PathResolver',
]
