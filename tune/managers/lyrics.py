"""
Lyric Synchronizer - LRC parsing and active line lookup.
"""
import re
import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from ..models import LyricLine

logger = logging.getLogger(__name__)

# [mm:ss.fraction]text
LRC_LINE = re.compile(r'^\[(\d+):(\d+)\.(\d+)\](.*)$')


def _fraction_to_ms(fraction: str) -> int:
    """1 digit is tenths, 2 digits hundredths, anything else taken as-is."""
    value = int(fraction)
    if len(fraction) == 1:
        return value * 100
    if len(fraction) == 2:
        return value * 10
    return value


def parse_lyrics(raw: str) -> List[LyricLine]:
    """Parse LRC text into lines in source order. Malformed lines are dropped."""
    lines: List[LyricLine] = []
    for source_line in raw.splitlines():
        match = LRC_LINE.match(source_line.rstrip())
        if not match:
            continue
        minutes, seconds, fraction, text = match.groups()
        timestamp_ms = int(minutes) * 60_000 + int(seconds) * 1000 + _fraction_to_ms(fraction)
        lines.append(LyricLine(timestamp_ms=timestamp_ms, text=text.strip()))
    return lines


def active_line(lines: List[LyricLine], position_ms: int) -> int:
    """Index of the last line whose timestamp is <= position.

    Before the first timestamp the first line is active.
    """
    active = 0
    for index, line in enumerate(lines):
        if line.timestamp_ms <= position_ms:
            active = index
        else:
            break
    return active


def visible_window(total: int, active: int, height: int) -> Tuple[int, int]:
    """(start, end) of a window of `height` lines centered on `active`."""
    if height <= 0 or total <= 0:
        return 0, 0
    start = active - height // 2
    start = max(0, min(start, total - height))
    return start, min(total, start + height)


class LyricSynchronizer:
    """Caches parsed lyrics per track so the tick loop never re-parses."""

    def __init__(self):
        self._cache: Dict[Path, List[LyricLine]] = {}

    def lines_for(self, path: Path, raw: Optional[str]) -> List[LyricLine]:
        if not raw:
            return []
        if path not in self._cache:
            lines = parse_lyrics(raw)
            logger.debug(f'Parsed {len(lines)} lyric lines for {path.name}')
            self._cache[path] = lines
        return self._cache[path]
