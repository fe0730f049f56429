"""
Utility modules for the rooming list system.
"""

from .models import (
    ALL, BookingStatus, SortDirection, LoadState, ExtractionError,
    BookingSnapshot, ReconciledRecord, FilterContext, GroupCount,
    GuestGroup, RosterStats, ReconciliationReport
)
from .logger import setup_logger, get_logger, RosterLogger

__all__ = [
    'ALL', 'BookingStatus', 'SortDirection', 'LoadState', 'ExtractionError',
    'BookingSnapshot', 'ReconciledRecord', 'FilterContext', 'GroupCount',
    'GuestGroup', 'RosterStats', 'ReconciliationReport',
    'setup_logger', 'get_logger', 'RosterLogger'
]
