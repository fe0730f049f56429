"""
API services.
"""

from .roster_service import RosterService, RosterNotReadyError

__all__ = ['RosterService', 'RosterNotReadyError']
