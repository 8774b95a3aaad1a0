"""
Tune Handlers - Input handling.
"""
from .keys import KeyHandler, KEY_BINDINGS

__all__ = ['KeyHandler', 'KEY_BINDINGS']
