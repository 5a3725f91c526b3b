"""
Configuration package.
"""
from .settings import CoachSettings, get_settings, settings

__all__ = ['CoachSettings', 'get_settings', 'settings']
