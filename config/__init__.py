"""
Configuration package for the Natural Remedy Bridge system.
"""

from .settings import Settings, settings

__all__ = ['Settings', 'settings']
