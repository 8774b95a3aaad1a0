"""
Library Scanner - Discovers audio files and reads their tags.

Unreadable files never abort a scan: each one falls back to filename-based
metadata or is skipped with a warning.
"""
import os
import logging
from pathlib import Path
from typing import List, Optional

import mutagen
from mutagen import File as MutaFile

from ..config import SUPPORTED_EXTENSIONS
from ..models import Track, UNKNOWN_ARTIST

logger = logging.getLogger(__name__)

# Vorbis comment / APEv2 keys that may hold lyrics
_LYRIC_KEYS = ('lyrics', 'unsyncedlyrics', 'LYRICS', 'UNSYNCEDLYRICS', 'Lyrics')


def _first(tags, key: str) -> Optional[str]:
    """First non-empty string value for a tag key, or None."""
    try:
        values = tags.get(key)
    except (KeyError, ValueError):
        return None
    if not values:
        return None
    if isinstance(values, (list, tuple)):
        values = values[0]
    text = str(values).strip()
    return text or None


def _embedded_lyrics(path: Path) -> Optional[str]:
    """Lyrics stored in the file's own tags (ID3 USLT, Vorbis, MP4)."""
    audio = MutaFile(str(path))
    if audio is None or audio.tags is None:
        return None
    tags = audio.tags

    # ID3 (mp3, some wav)
    if hasattr(tags, 'getall'):
        for frame in tags.getall('USLT'):
            if str(frame.text).strip():
                return str(frame.text)
        return None

    # MP4 atoms
    if '\xa9lyr' in tags:
        return _first(tags, '\xa9lyr')

    for key in _LYRIC_KEYS:
        text = _first(tags, key)
        if text:
            return text
    return None


def _sidecar_lyrics(path: Path) -> Optional[str]:
    """Lyrics from a '<stem>.lrc' file next to the audio file."""
    lrc_path = path.with_suffix('.lrc')
    if not lrc_path.is_file():
        return None
    try:
        return lrc_path.read_text(encoding='utf-8', errors='replace')
    except OSError as e:
        logger.warning(f'Cannot read lyrics file {lrc_path}: {e}')
        return None


def read_track(path: Path) -> Track:
    """Build a Track from a file, falling back to filename metadata."""
    title = path.stem or 'Unknown'
    artist = UNKNOWN_ARTIST
    duration = 0
    lyrics = None

    try:
        audio = MutaFile(str(path), easy=True)
        if audio is not None:
            if audio.info is not None and getattr(audio.info, 'length', None):
                duration = max(0, int(audio.info.length))
            if audio.tags is not None:
                title = _first(audio.tags, 'title') or title
                artist = _first(audio.tags, 'artist') or artist
        lyrics = _embedded_lyrics(path)
    except (mutagen.MutagenError, OSError) as e:
        logger.debug(f'No tags for {path.name}: {e}')
    except Exception as e:
        logger.warning(f'Unexpected error reading tags of {path.name}: {e}', exc_info=True)

    if lyrics is None:
        lyrics = _sidecar_lyrics(path)

    return Track(path=path, title=title, artist=artist, duration=duration, lyrics=lyrics)


def is_supported(path: Path) -> bool:
    return path.suffix.lower().lstrip('.') in SUPPORTED_EXTENSIONS


def scan_music_directory(music_dir: Path) -> List[Track]:
    """Recursively collect supported audio files, ordered by artist then title."""
    logger.info(f'Scanning {music_dir}')
    tracks: List[Track] = []

    def on_walk_error(error: OSError):
        logger.warning(f'Skipping unreadable directory: {error}')

    for root, _dirs, files in os.walk(music_dir, followlinks=True, onerror=on_walk_error):
        for name in files:
            path = Path(root) / name
            if not is_supported(path) or not path.is_file():
                continue
            try:
                tracks.append(read_track(path))
            except Exception as e:
                logger.warning(f'Skipping {path}: {e}', exc_info=True)

    tracks.sort(key=lambda t: (t.artist.lower(), t.title.lower()))
    logger.info(f'Found {len(tracks)} tracks')
    return tracks
