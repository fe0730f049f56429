"""
Configuration module for the rooming list system.
"""

from .settings import extraction_config, roster_config, app_config

__all__ = ['extraction_config', 'roster_config', 'app_config']
