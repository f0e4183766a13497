"""
Directory handle abstraction.

The sync engine never touches paths directly. It works on StorageNode
handles that expose the handful of operations it needs (list, find,
create, delete, open), so the two library roots can come from anywhere a
caller has been granted access to.
"""

import logging
import shutil
from pathlib import Path
from typing import BinaryIO, List, Optional, Protocol, Union

logger = logging.getLogger(__name__)


class StorageNode(Protocol):
    """
    Capability interface over a file or directory in a library tree.

    Create operations return None on failure instead of raising; delete
    returns False. Opening streams raises OSError.
    """

    @property
    def name(self) -> str:
        ...

    def is_directory(self) -> bool:
        ...

    def is_file(self) -> bool:
        ...

    def list_children(self) -> List["StorageNode"]:
        ...

    def find(self, name: str) -> Optional["StorageNode"]:
        ...

    def create_directory(self, name: str) -> Optional["StorageNode"]:
        ...

    def create_file(self, mime_type: str, name: str) -> Optional["StorageNode"]:
        ...

    def delete(self) -> bool:
        ...

    def open_read(self) -> BinaryIO:
        ...

    def open_write(self) -> BinaryIO:
        ...


class LocalNode:
    """
    StorageNode backed by the local filesystem.

    Example:
        >>> root = LocalNode.from_path('~/ES-DE')
        >>> gamelists = root.find('gamelists')
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> Optional["LocalNode"]:
        """
        Create a handle for an existing directory.

        Args:
            path: Directory path (``~`` is expanded)

        Returns:
            LocalNode, or None if the path is not an existing directory
        """
        resolved = Path(path).expanduser()
        if not resolved.is_dir():
            logger.debug(f"Not a directory: {resolved}")
            return None
        return cls(resolved)

    @property
    def name(self) -> str:
        return self.path.name

    def is_directory(self) -> bool:
        return self.path.is_dir()

    def is_file(self) -> bool:
        return self.path.is_file()

    def list_children(self) -> List["LocalNode"]:
        """List immediate children in the order the OS returns them."""
        return [LocalNode(child) for child in self.path.iterdir()]

    def find(self, name: str) -> Optional["LocalNode"]:
        child = self.path / name
        if not child.exists():
            return None
        return LocalNode(child)

    def create_directory(self, name: str) -> Optional["LocalNode"]:
        child = self.path / name
        try:
            child.mkdir()
        except OSError as e:
            logger.debug(f"Could not create directory {child}: {e}")
            return None
        return LocalNode(child)

    def create_file(self, mime_type: str, name: str) -> Optional["LocalNode"]:
        """
        Create a new empty file.

        Args:
            mime_type: Content type hint (not recorded by the local filesystem)
            name: File name

        Returns:
            Handle for the new file, or None if it exists or cannot be created
        """
        child = self.path / name
        try:
            with open(child, 'xb'):
                pass
        except OSError as e:
            logger.debug(f"Could not create {mime_type} file {child}: {e}")
            return None
        return LocalNode(child)

    def delete(self) -> bool:
        try:
            if self.path.is_dir():
                shutil.rmtree(self.path)
            else:
                self.path.unlink()
        except OSError as e:
            logger.debug(f"Could not delete {self.path}: {e}")
            return False
        return True

    def open_read(self) -> BinaryIO:
        return open(self.path, 'rb')

    def open_write(self) -> BinaryIO:
        return open(self.path, 'wb')

    def __eq__(self, other) -> bool:
        return isinstance(other, LocalNode) and self.path == other.path

    def __hash__(self) -> int:
        return hash(self.path)

    def __repr__(self) -> str:
        return f"LocalNode({str(self.path)!r})"
