"""
Per-game media resolution.

Binds the artwork directories of one platform to the MediaLocator and
ArtworkSyncer so the gamelist transformer only has to ask "which media
references belong to this game key?".
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from ..storage.handles import StorageNode
from .artwork_syncer import ArtworkSyncer
from .locator import MediaLocator
from .media_types import ArtworkCategory, MediaCategory, MEDIA_TAG_ORDER, get_sources_for_category

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MediaReference:
    """
    A media element to append to a <game> entry.

    Attributes:
        tag: gamelist.xml tag ('thumbnail' or 'image')
        reference: Relative path written as the element text
        source_category: Artwork directory the file was copied from
    """
    tag: str
    reference: str
    source_category: str


class GameMediaResolver:
    """
    Finds, copies and references the artwork of one game.

    Lookup rules:
    - thumbnail: covers
    - image: fanart, or screenshots when no fanart matched

    Missing artwork or a failed copy simply leaves the element out.

    Example:
        >>> resolver = GameMediaResolver(
        ...     artwork_dirs={ArtworkCategory.COVERS: covers},
        ...     destination_dirs={MediaCategory.THUMBNAIL: thumb_dir,
        ...                       MediaCategory.IMAGE: image_dir})
        >>> resolver('Mario')
        [MediaReference(tag='thumbnail', reference='./media/thumbnail/Mario.png', ...)]
    """

    def __init__(
        self,
        artwork_dirs: Dict[ArtworkCategory, Optional[StorageNode]],
        destination_dirs: Dict[MediaCategory, StorageNode],
        locator: Optional[MediaLocator] = None,
        syncer: Optional[ArtworkSyncer] = None
    ):
        """
        Initialize game media resolver.

        Args:
            artwork_dirs: Source artwork directories (missing ones may be None)
            destination_dirs: Destination media/thumbnail and media/image directories
            locator: MediaLocator used for prefix matching
            syncer: ArtworkSyncer used for copying
        """
        self.artwork_dirs = artwork_dirs
        self.destination_dirs = destination_dirs
        self.locator = locator or MediaLocator()
        self.syncer = syncer or ArtworkSyncer()

        self.stats = {
            'games': 0,
            'thumbnail': 0,
            'image': 0,
            'copy_failed': 0,
            'no_media': 0,
        }

    def __call__(self, game_key: str) -> List[MediaReference]:
        return self.resolve(game_key)

    def resolve(self, game_key: str) -> List[MediaReference]:
        """
        Copy the artwork of one game and return its references.

        Args:
            game_key: Game key derived from the ROM path

        Returns:
            Zero, one or two MediaReference entries (thumbnail first)
        """
        self.stats['games'] += 1
        logger.debug(f"Looking for media for: {game_key}")

        references = []
        for category in MEDIA_TAG_ORDER:
            reference = self._resolve_category(category, game_key)
            if reference is not None:
                references.append(reference)

        if references:
            logger.debug(f"Copied media for game: {game_key}")
        else:
            self.stats['no_media'] += 1
            logger.debug(f"No media copied for game: {game_key}")

        return references

    def _resolve_category(
        self,
        category: MediaCategory,
        game_key: str
    ) -> Optional[MediaReference]:
        for source_category in get_sources_for_category(category):
            asset = self.locator.find(self.artwork_dirs.get(source_category), game_key)
            if asset is None:
                continue

            logger.debug(f"Found {category.value}: {asset.name} (from {source_category.value})")
            reference = self.syncer.copy_asset(
                asset, self.destination_dirs[category], category.value
            )
            if reference is None:
                self.stats['copy_failed'] += 1
                return None

            self.stats[category.value] += 1
            return MediaReference(
                tag=category.value,
                reference=reference,
                source_category=source_category.value
            )

        return None
