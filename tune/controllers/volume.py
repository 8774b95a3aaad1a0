"""
Volume Controller - Volume level in 0.1 steps, with mute.

Mute remembers the level it replaced; unmuting restores it, so any number
of mute/unmute cycles returns to the last level set before muting.
"""
import logging

from ..config import DEFAULT_VOLUME, VOLUME_STEP
from ..utils import quantize_volume

logger = logging.getLogger(__name__)


class VolumeController:
    """Holds the volume level and mute state."""

    def __init__(self, level: float = DEFAULT_VOLUME):
        self.level = quantize_volume(level)
        self.muted = False
        self.pre_mute = self.level

    def set(self, value: float) -> float:
        """Set the level (quantized and clamped). An explicit set ends mute."""
        self.level = quantize_volume(value)
        self.muted = False
        logger.debug(f'Volume: {self.level:.1f}')
        return self.level

    def increase(self) -> float:
        return self.set(self.level + VOLUME_STEP)

    def decrease(self) -> float:
        return self.set(self.level - VOLUME_STEP)

    def toggle_mute(self) -> bool:
        """Mute (saving the level) or unmute (restoring it). Returns the new muted flag."""
        if self.muted:
            self.level = self.pre_mute
            self.muted = False
            logger.info(f'Unmuted, volume {self.level:.1f}')
        else:
            self.pre_mute = self.level
            self.level = 0.0
            self.muted = True
            logger.info('Muted')
        return self.muted

    @property
    def percent(self) -> int:
        return int(round(self.level * 100))

    @property
    def persisted_level(self) -> float:
        """Level to save across runs: the pre-mute level while muted."""
        return self.pre_mute if self.muted else self.level
