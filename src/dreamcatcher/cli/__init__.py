"""Dreamcatcher CLI module.

Provides command-line interface for inspecting machine files.
"""

from .main import cli, main

__all__ = ['cli', 'main']
