"""Image source resolution for menu item cards.

Every card tries its candidate images in a fixed order: the full resolution
``primary`` URL first, then the ``thumbnail`` URL, then a placeholder icon.
The browser reports one load or error signal per attempt; the resolver turns
those signals into a render-ready status.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Literal, Optional, Set, Tuple

from menusnap.schemas import MenuItem

logger = logging.getLogger(__name__)

ImageStatus = Literal["loading", "loaded", "exhausted"]
ImageOutcome = Literal["load", "error"]


class ImageSource(str, Enum):
    PRIMARY = "primary"
    THUMBNAIL = "thumbnail"
    NONE = "none"


@dataclass(frozen=True)
class ImageCandidates:
    primary: Optional[str] = None
    thumbnail: Optional[str] = None

    @classmethod
    def from_item(cls, item: MenuItem) -> "ImageCandidates":
        return cls(primary=item.primary_url, thumbnail=item.thumbnail_url)

    @property
    def has_any(self) -> bool:
        return bool(self.primary or self.thumbnail)

    def url_for(self, source: ImageSource) -> Optional[str]:
        if source is ImageSource.PRIMARY:
            return self.primary
        if source is ImageSource.THUMBNAIL:
            return self.thumbnail
        return None


@dataclass
class ImageResolutionState:
    active_source: ImageSource
    loaded: bool = False
    exhausted: bool = False

    @property
    def terminal(self) -> bool:
        return self.loaded or self.exhausted


def _initial_state(candidates: ImageCandidates) -> ImageResolutionState:
    if candidates.primary:
        return ImageResolutionState(active_source=ImageSource.PRIMARY)
    if candidates.thumbnail:
        return ImageResolutionState(active_source=ImageSource.THUMBNAIL)
    # Nothing to attempt: the placeholder is shown straight away.
    return ImageResolutionState(active_source=ImageSource.NONE, exhausted=True)


class ImageResolver:
    """State machine for a single card's image.

    Signals carry the source they were issued for. A signal for a source that
    is no longer active, or one that arrives after a terminal state was
    reached, is stale and leaves the state untouched.
    """

    def __init__(self, candidates: ImageCandidates) -> None:
        self.candidates = candidates
        self.state = _initial_state(candidates)

    @classmethod
    def for_item(cls, item: MenuItem) -> "ImageResolver":
        return cls(ImageCandidates.from_item(item))

    @property
    def status(self) -> ImageStatus:
        if self.state.exhausted:
            return "exhausted"
        if self.state.loaded:
            return "loaded"
        return "loading"

    @property
    def display_url(self) -> Optional[str]:
        """URL the card should currently render inline."""

        if self.state.exhausted:
            return None
        return self.candidates.url_for(self.state.active_source)

    @property
    def link_url(self) -> Optional[str]:
        """Target of the "view full image" link.

        Always the primary URL when there is one, even while the thumbnail is
        the source displayed inline.
        """

        if self.state.exhausted or not self.candidates.has_any:
            return None
        return self.candidates.primary or self.candidates.thumbnail

    def _accepts(self, source: ImageSource) -> bool:
        if self.state.terminal or source is not self.state.active_source:
            logger.debug(
                "Ignoring stale image signal",
                extra={"source": source.value, "active_source": self.state.active_source.value},
            )
            return False
        return True

    def on_load(self, source: ImageSource) -> bool:
        """Record a successful load. Returns True when the state changed."""

        if not self._accepts(source):
            return False
        self.state.loaded = True
        return True

    def on_error(self, source: ImageSource) -> bool:
        """Record a failed load and fall back. Returns True when the state changed."""

        if not self._accepts(source):
            return False
        if source is ImageSource.PRIMARY and self.candidates.thumbnail:
            logger.info(
                "Primary image failed, falling back to thumbnail",
                extra={"primary": self.candidates.primary, "thumbnail": self.candidates.thumbnail},
            )
            self.state.active_source = ImageSource.THUMBNAIL
            self.state.loaded = False
            return True
        logger.warning(
            "All image candidates failed",
            extra={"primary": self.candidates.primary, "thumbnail": self.candidates.thumbnail},
        )
        self.state.active_source = ImageSource.NONE
        self.state.exhausted = True
        return True

    def handle(self, source: ImageSource, outcome: ImageOutcome) -> bool:
        if outcome == "load":
            return self.on_load(source)
        return self.on_error(source)


def assign_item_keys(items: Iterable[MenuItem]) -> Tuple[Tuple[str, MenuItem], ...]:
    """Pair each item with a stable identity that ignores its list position.

    The backend ``id`` wins when present, the dish name otherwise. Repeated
    identities get an occurrence suffix (``"Pad Thai#2"``).
    """

    seen: Dict[str, int] = {}
    used: Set[str] = set()
    keyed = []
    for item in items:
        base = (item.id or item.dish).strip() or "item"
        count = seen.get(base, 0) + 1
        key = base if count == 1 else f"{base}#{count}"
        # A dish may literally be named like a suffixed key.
        while key in used:
            count += 1
            key = f"{base}#{count}"
        seen[base] = count
        used.add(key)
        keyed.append((key, item))
    return tuple(keyed)


class ResolverRegistry:
    """Explicit map from item identity to its ``ImageResolver``."""

    def __init__(self) -> None:
        self._resolvers: Dict[str, ImageResolver] = {}
        self._lock = threading.Lock()

    def __contains__(self, key: object) -> bool:
        return key in self._resolvers

    def __len__(self) -> int:
        return len(self._resolvers)

    def get(self, key: str) -> Optional[ImageResolver]:
        return self._resolvers.get(key)

    def sync(self, keyed_items: Iterable[Tuple[str, MenuItem]]) -> None:
        """Align resolvers with the current items.

        Unchanged items keep their state, items whose candidate URLs changed
        start over, and items that disappeared are discarded.
        """

        with self._lock:
            current: Dict[str, ImageResolver] = {}
            for key, item in keyed_items:
                candidates = ImageCandidates.from_item(item)
                existing = self._resolvers.get(key)
                if existing is not None and existing.candidates == candidates:
                    current[key] = existing
                    continue
                if existing is not None:
                    logger.debug("Resetting image resolver", extra={"item_key": key})
                current[key] = ImageResolver(candidates)
            self._resolvers = current

    def discard(self, key: str) -> None:
        with self._lock:
            self._resolvers.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._resolvers.clear()

    def dispatch(self, key: str, source: ImageSource, outcome: ImageOutcome) -> Optional[ImageResolver]:
        """Deliver a browser signal. Unknown or discarded items are a no-op."""

        with self._lock:
            resolver = self._resolvers.get(key)
            if resolver is None:
                logger.debug("Image signal for discarded item", extra={"item_key": key})
                return None
            resolver.handle(source, outcome)
            return resolver


__all__ = [
    "ImageCandidates",
    "ImageResolutionState",
    "ImageResolver",
    "ImageSource",
    "ImageStatus",
    "ResolverRegistry",
    "assign_item_keys",
]
