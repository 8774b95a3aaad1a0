#!/usr/bin/env python3
"""
Tune - Terminal music player

Usage:
    python -m tune                # Play ~/Music (or $TUNE_MUSIC_DIR)
    python -m tune /path/to/music # Play another directory
    python -m tune --mock         # No audio device (UI testing)
"""
import os
import sys
import logging
import platform
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional

import pygame

from .config import (
    MUSIC_DIR, STATE_FILE, MOCK_MODE,
    LOG_DIR, LOG_FILE, LOG_MAX_BYTES, LOG_BACKUP_COUNT,
)
from .errors import AudioDeviceError
from .api import AudioOutput, NullAudioOutput, SessionStore, scan_music_directory
from .app import Tune


def setup_logging():
    """Configure logging with a rotating file handler.

    The terminal belongs to curses, so console logging is opt-in
    (TUNE_LOG_CONSOLE=1, written to stderr).
    """
    level_name = os.environ.get('TUNE_LOG_LEVEL', 'INFO').upper()
    level = getattr(logging, level_name, logging.INFO)

    formatter = logging.Formatter(
        '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    root = logging.getLogger()
    root.setLevel(level)

    if os.environ.get('TUNE_LOG_CONSOLE') == '1':
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(formatter)
        console.setLevel(level)
        root.addHandler(console)

    try:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            LOG_FILE,
            maxBytes=LOG_MAX_BYTES,
            backupCount=LOG_BACKUP_COUNT,
            encoding='utf-8'
        )
        file_handler.setFormatter(formatter)
        file_handler.setLevel(logging.DEBUG)
        root.addHandler(file_handler)
        root.info(f'Logging to: {LOG_FILE}')
    except (OSError, PermissionError) as e:
        root.addHandler(logging.NullHandler())
        print(f'Could not create log file: {e}', file=sys.stderr)


def log_system_info(logger: logging.Logger, music_dir: Path):
    """Log environment information at startup."""
    logger.info('=' * 50)
    logger.info('TUNE STARTUP')
    logger.info('=' * 50)
    logger.info(f'Python: {sys.version.split()[0]}')
    logger.info(f'Platform: {platform.system()} {platform.release()}')
    logger.info(f'pygame: {pygame.version.ver}')
    logger.info(f'Music dir: {music_dir}')
    logger.info(f'State file: {STATE_FILE}')
    logger.info('=' * 50)


def music_dir_from_args(argv: List[str]) -> Path:
    """First non-flag argument, else the configured music directory."""
    for arg in argv:
        if not arg.startswith('-'):
            return Path(arg).expanduser()
    return MUSIC_DIR


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for tune."""
    setup_logging()
    logger = logging.getLogger(__name__)

    music_dir = music_dir_from_args(sys.argv[1:] if argv is None else argv)
    log_system_info(logger, music_dir)

    output = NullAudioOutput() if MOCK_MODE else AudioOutput()
    try:
        output.open()
    except AudioDeviceError as e:
        logger.critical(str(e))
        print(f'tune: {e}', file=sys.stderr)
        return 1

    if not music_dir.is_dir():
        logger.warning(f'Music directory not found: {music_dir}')
    tracks = scan_music_directory(music_dir) if music_dir.is_dir() else []

    store = SessionStore(STATE_FILE)
    app = Tune(tracks, output, store, store.load())
    app.start()
    return 0


if __name__ == '__main__':
    sys.exit(main())
