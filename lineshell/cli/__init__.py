"""Host command-line application"""

from .host import app, main

__all__ = ['app', 'main']
