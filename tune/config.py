"""
Tune Configuration - All constants and settings.
"""
import os
import sys
from pathlib import Path

import appdirs

APP_NAME = 'tune'

# ============================================
# MUSIC LIBRARY
# ============================================

SUPPORTED_EXTENSIONS = ('mp3', 'flac', 'wav', 'ogg')


def default_music_dir() -> Path:
    """Music directory: $TUNE_MUSIC_DIR, else ~/Music, else the working directory."""
    env_dir = os.environ.get('TUNE_MUSIC_DIR')
    if env_dir:
        return Path(env_dir).expanduser()
    home_music = Path.home() / 'Music'
    if home_music.is_dir():
        return home_music
    return Path('.')


MUSIC_DIR = default_music_dir()

# ============================================
# PATHS
# ============================================

DATA_DIR = Path(appdirs.user_data_dir(APP_NAME))
STATE_FILE = Path(os.environ.get('TUNE_STATE_FILE', DATA_DIR / 'state.json'))

# Logging directory
LOG_DIR = Path(appdirs.user_log_dir(APP_NAME))
LOG_FILE = LOG_DIR / 'tune.log'
LOG_MAX_BYTES = 2 * 1024 * 1024  # 2MB per file
LOG_BACKUP_COUNT = 5

# ============================================
# COMMAND LINE FLAGS
# ============================================

MOCK_MODE = '--mock' in sys.argv or '-m' in sys.argv

# ============================================
# TIMING
# ============================================

TICK_MS = 50                 # Input poll timeout, one tick of the host loop
STATUS_MESSAGE_TTL = 3.0     # Seconds a status message stays visible
RESTART_THRESHOLD = 3.0      # "Previous" restarts the track after this many seconds

# ============================================
# TRANSPORT
# ============================================

SEEK_STEP = 5                # Seconds per seek key press
VOLUME_STEP = 0.1
DEFAULT_VOLUME = 1.0

# ============================================
# COLORS (curses color pairs: name, foreground, background; -1 = terminal default)
# ============================================

COLOR_PAIRS = [
    ('selected', 3, -1),      # Yellow
    ('playing', 2, -1),       # Green
    ('border', 6, -1),        # Cyan
    ('muted', 8, -1),         # Grey
    ('lyric_active', 6, -1),  # Cyan
    ('error', 1, -1),         # Red
]

# ============================================
# AUDIO OUTPUT
# ============================================

MIXER_FREQUENCY = 44100
MIXER_BUFFER = 2048
