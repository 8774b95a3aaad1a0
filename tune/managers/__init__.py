"""
Tune Managers - Catalog, queue ordering and lyric synchronization.
"""
from .catalog import Catalog
from .queue import QueueManager
from .lyrics import LyricSynchronizer, parse_lyrics, active_line, visible_window

__all__ = [
    'Catalog',
    'QueueManager',
    'LyricSynchronizer',
    'parse_lyrics',
    'active_line',
    'visible_window',
]
