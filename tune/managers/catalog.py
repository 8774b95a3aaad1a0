"""
Catalog - The session's track list, with sorting and search.
"""
import logging
from pathlib import Path
from typing import Iterator, List, Optional

from ..models import SortMode, Track

logger = logging.getLogger(__name__)


def _sort_key(mode: SortMode):
    if mode == SortMode.TITLE:
        return lambda t: t.title.lower()
    if mode == SortMode.ARTIST:
        return lambda t: (t.artist.lower(), t.title.lower())
    return lambda t: t.filename


class Catalog:
    """
    Ordered list of tracks, mutable only by a full re-sort.

    Track identity is the path; indices are only valid until the next sort.
    """

    def __init__(self, tracks: List[Track]):
        self._tracks = list(tracks)

    def __len__(self) -> int:
        return len(self._tracks)

    def __getitem__(self, index: int) -> Track:
        return self._tracks[index]

    def __iter__(self) -> Iterator[Track]:
        return iter(self._tracks)

    def sort(self, mode: SortMode):
        """Stable in-place sort by file name, title or artist."""
        self._tracks.sort(key=_sort_key(mode))
        logger.info(f'Catalog sorted by {mode.value.lower()}')

    def index_of(self, path) -> Optional[int]:
        """Current index of the track with this path."""
        target = Path(path)
        for index, track in enumerate(self._tracks):
            if track.path == target:
                return index
        return None

    def search(self, query: str, start: int = 0) -> Optional[int]:
        """First index at or after start (wrapping) whose title, artist or
        file name contains query, case-insensitively."""
        needle = query.strip().lower()
        if not needle or not self._tracks:
            return None

        count = len(self._tracks)
        for offset in range(count):
            index = (start + offset) % count
            track = self._tracks[index]
            if (needle in track.title.lower()
                    or needle in track.artist.lower()
                    or needle in track.filename.lower()):
                return index
        return None
