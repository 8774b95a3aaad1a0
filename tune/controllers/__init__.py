"""
Tune Controllers - Playback, volume and the player session.
"""
from .volume import VolumeController
from .playback import PlaybackController
from .session import PlayerSession, LyricView

__all__ = ['VolumeController', 'PlaybackController', 'PlayerSession', 'LyricView']
