"""
Queue Manager - Traversal order over catalog indices.

The queue is a permutation of 0..len(catalog). It is a level of indirection
between "what plays next" and the catalog, so shuffling or sorting never
loses track of the playing track: every reorder is followed by relocate().
"""
import random
import logging
from typing import List, Optional

from ..models import RepeatMode

logger = logging.getLogger(__name__)


class QueueManager:
    """Play order (identity or shuffled) plus a cursor into it."""

    def __init__(self, size: int, shuffle: bool = False, rng: Optional[random.Random] = None):
        self._rng = rng or random.Random()
        self.size = size
        self.shuffle = shuffle
        self.order: List[int] = []
        self.cursor: Optional[int] = None
        self.rebuild(shuffle)

    def __len__(self) -> int:
        return len(self.order)

    @property
    def current(self) -> Optional[int]:
        """Catalog index under the cursor."""
        if self.cursor is None:
            return None
        return self.order[self.cursor]

    def rebuild(self, shuffled: bool):
        """Reset the order to identity, or to a fresh random permutation.

        The cursor is cleared; callers relocate it afterwards.
        """
        self.order = list(range(self.size))
        if shuffled:
            self._rng.shuffle(self.order)
        self.cursor = None

    def relocate(self, catalog_index: int) -> Optional[int]:
        """Point the cursor at the queue position holding catalog_index."""
        try:
            self.cursor = self.order.index(catalog_index)
        except ValueError:
            logger.warning(f'Catalog index {catalog_index} not in queue')
            self.cursor = None
        return self.cursor

    def advance(self, repeat_mode: RepeatMode) -> Optional[int]:
        """Move to the next position. Returns the new cursor, or None at the end.

        Past the end the queue wraps only with RepeatMode.ALL; otherwise the
        cursor is left where it was and the caller decides what to do.
        """
        if not self.order:
            return None
        if self.cursor is None:
            self.cursor = 0
            return self.cursor

        next_cursor = self.cursor + 1
        if next_cursor >= len(self.order):
            if repeat_mode != RepeatMode.ALL:
                return None
            next_cursor = 0
        self.cursor = next_cursor
        return self.cursor

    def retreat(self) -> Optional[int]:
        """Move to the previous position, wrapping from the start to the end."""
        if not self.order:
            return None
        if self.cursor is None or self.cursor == 0:
            self.cursor = len(self.order) - 1
        else:
            self.cursor -= 1
        return self.cursor

    def toggle_shuffle(self, current_catalog_index: Optional[int]) -> bool:
        """Flip shuffle, keeping the cursor on the playing track. Returns the new flag."""
        self.shuffle = not self.shuffle
        self.rebuild(self.shuffle)

        if current_catalog_index is not None:
            if self.shuffle:
                self.relocate(current_catalog_index)
            else:
                # Identity order: position == catalog index
                self.cursor = current_catalog_index

        logger.info(f'Shuffle {"on" if self.shuffle else "off"}')
        return self.shuffle
