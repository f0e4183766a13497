"""
Streaming gamelist.xml transformer.

Re-emits a gamelist document event by event while appending freshly
resolved <thumbnail>/<image> elements to every <game> entry.
"""

import logging
import re
from typing import Callable, Dict, List, Optional, Tuple

from lxml import etree

from ..media.game_media import MediaReference
from ..media.media_types import MEDIA_TAGS
from .game_key import derive_game_key

logger = logging.getLogger(__name__)

GAME_TAG = "game"
PATH_TAG = "path"

MediaResolver = Callable[[str], List[MediaReference]]

# Internal DTD subset of a DOCTYPE declaration: "<!DOCTYPE name ... [ ... ]>"
_INTERNAL_SUBSET = re.compile(rb'(<!DOCTYPE\s[^\[>]*?)\s*\[.*?\]\s*>', re.DOTALL)


def _local_name(tag: str) -> str:
    return etree.QName(tag).localname


def _builder_nsmap(nsmap: Optional[Dict[str, str]]) -> Optional[Dict[Optional[str], str]]:
    """Parser targets report the default namespace under '', TreeBuilder wants None."""
    if not nsmap:
        return None
    return {(prefix or None): uri for prefix, uri in nsmap.items()}


def _strip_internal_subset(source: bytes) -> bytes:
    """
    Drop the internal subset of a DOCTYPE declaration.

    lxml parser targets cannot register entity declarations, so the subset
    is removed and only name, public id and system id are kept. A document
    that still references a declared entity then fails as malformed.
    """
    return _INTERNAL_SUBSET.sub(rb'\1>', source, count=1)


class _TransformTarget:
    """
    lxml parser target that copies every parse event into a TreeBuilder.

    Tracks whether it is inside a <game>, the current tag and the text of
    the most recent <path>. On </game> the media resolver is called and
    its references are appended as the last children of the entry.
    """

    def __init__(self, media_resolver: MediaResolver, replace_existing_media: bool):
        self.builder = etree.TreeBuilder()
        self.media_resolver = media_resolver
        self.replace_existing_media = replace_existing_media

        self.depth = 0
        self.root_closed = False
        self.prolog: List[etree._Element] = []
        self.epilog: List[etree._Element] = []
        self.doctype_info: Optional[Tuple[str, Optional[str], Optional[str]]] = None

        self.in_game = False
        self.game_depth = 0
        self.game_namespace: Optional[str] = None
        self.current_tag: Optional[str] = None
        self.path_parts: Optional[List[str]] = None
        self.skip_depth = 0
        self.pending_text: List[str] = []

        self.games_processed = 0
        self.games_without_key = 0
        self.media_appended = 0

    def start(self, tag, attrib, nsmap=None):
        if self.skip_depth:
            self.skip_depth += 1
            return

        self._flush_text()
        name = _local_name(tag)

        if (
            self.replace_existing_media
            and self.in_game
            and self.depth == self.game_depth
            and name in MEDIA_TAGS
        ):
            # Source media element is regenerated on </game>
            self.skip_depth = 1
            return

        self.depth += 1
        self.current_tag = name
        self.builder.start(tag, dict(attrib), _builder_nsmap(nsmap))

        if name == GAME_TAG:
            self.in_game = True
            self.game_depth = self.depth
            self.game_namespace = etree.QName(tag).namespace
            self.path_parts = None
        elif name == PATH_TAG and self.in_game:
            self.path_parts = []

    def data(self, data):
        if self.skip_depth:
            return

        self.pending_text.append(data)
        if self.in_game and self.current_tag == PATH_TAG and self.path_parts is not None:
            self.path_parts.append(data)

    def end(self, tag):
        if self.skip_depth:
            self.skip_depth -= 1
            return

        self._flush_text()

        if _local_name(tag) == GAME_TAG and self.in_game:
            self.in_game = False
            self._append_media()

        self.builder.end(tag)
        self.current_tag = None
        self.depth -= 1
        if self.depth == 0:
            self.root_closed = True

    def comment(self, text):
        if self.skip_depth:
            return

        self._flush_text()
        if self.depth == 0:
            self._top_level().append(etree.Comment(text))
        else:
            self.builder.comment(text)

    def pi(self, target, data=None):
        if self.skip_depth:
            return

        self._flush_text()
        if self.depth == 0:
            self._top_level().append(etree.ProcessingInstruction(target, data))
        else:
            self.builder.pi(target, data)

    def doctype(self, name, pubid, system):
        self.doctype_info = (name, pubid, system)

    def close(self):
        self._flush_text()
        root = self.builder.close()

        for node in self.prolog:
            root.addprevious(node)
        for node in reversed(self.epilog):
            root.addnext(node)

        return root

    def _top_level(self) -> List[etree._Element]:
        return self.epilog if self.root_closed else self.prolog

    def _flush_text(self) -> None:
        """Emit buffered character data, dropping whitespace-only runs."""
        if not self.pending_text:
            return

        text = "".join(self.pending_text)
        self.pending_text = []
        if text.strip():
            self.builder.data(text)

    def _append_media(self) -> None:
        path_text = "".join(self.path_parts) if self.path_parts is not None else None
        game_key = derive_game_key(path_text)
        if game_key is None:
            self.games_without_key += 1
            logger.debug("Game entry without a path, no media lookup")
            return

        self.games_processed += 1
        for reference in self.media_resolver(game_key):
            # Appended elements share the namespace of their <game>
            tag = f"{{{self.game_namespace}}}{reference.tag}" if self.game_namespace else reference.tag
            self.builder.start(tag, {})
            self.builder.data(reference.reference)
            self.builder.end(tag)
            self.media_appended += 1


class GamelistTransformer:
    """
    Rewrites gamelist.xml media references while streaming the document.

    Every tag, attribute, namespace, comment and processing instruction is
    carried over. For each <game> the injected media resolver is asked for
    the references of its game key; they are appended after the entry's
    existing children.

    Entries that already carry <image>/<thumbnail> elements keep them, so
    the output holds both the old and the new elements. Set
    replace_existing_media=True to drop the old ones instead.

    Example:
        >>> transformer = GamelistTransformer(GameMediaResolver(...))
        >>> output = transformer.transform(Path('gamelist.xml').read_bytes())
    """

    def __init__(
        self,
        media_resolver: MediaResolver,
        replace_existing_media: bool = False
    ):
        """
        Initialize gamelist transformer.

        Args:
            media_resolver: Callable mapping a game key to its media references
            replace_existing_media: Drop source <image>/<thumbnail> elements
                                    of each game instead of keeping them
        """
        self.media_resolver = media_resolver
        self.replace_existing_media = replace_existing_media
        self.games_processed = 0
        self.media_appended = 0

    def transform(self, source: bytes) -> Optional[bytes]:
        """
        Transform a gamelist document.

        Args:
            source: Raw gamelist.xml content

        Returns:
            Transformed UTF-8 document, or None if the source is malformed
            or processing failed
        """
        target = _TransformTarget(self.media_resolver, self.replace_existing_media)
        parser = etree.XMLParser(target=target)

        try:
            root = etree.fromstring(_strip_internal_subset(source), parser)
            output = self._serialize(root, target.doctype_info)
        except etree.XMLSyntaxError as e:
            logger.error(f"Malformed gamelist: {e}")
            return None
        except Exception as e:
            logger.error(f"Error parsing and enriching gamelist: {e}", exc_info=True)
            return None

        self.games_processed = target.games_processed
        self.media_appended = target.media_appended
        logger.debug(
            f"Processed {target.games_processed} games "
            f"({target.media_appended} media elements appended)"
        )
        return output

    def _serialize(
        self,
        root: etree._Element,
        doctype: Optional[Tuple[str, Optional[str], Optional[str]]]
    ) -> bytes:
        options = {
            'encoding': 'UTF-8',
            'xml_declaration': True,
            'standalone': True,
            'pretty_print': True,
        }
        if doctype is not None:
            options['doctype'] = _format_doctype(*doctype)

        return etree.tostring(root.getroottree(), **options)


def _format_doctype(name: str, pubid: Optional[str], system: Optional[str]) -> str:
    if pubid:
        return f'<!DOCTYPE {name} PUBLIC "{pubid}" "{system or ""}">'
    if system:
        return f'<!DOCTYPE {name} SYSTEM "{system}">'
    return f'<!DOCTYPE {name}>'
