"""
Tune - Terminal music player with synchronized lyrics.
"""
import os

# pygame prints a banner on import, which would land on the curses screen
os.environ.setdefault('PYGAME_HIDE_SUPPORT_PROMPT', '1')

__version__ = '0.1.0'
