"""
Tune UI - Terminal rendering.
"""
from .renderer import Renderer

__all__ = ['Renderer']
