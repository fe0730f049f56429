"""
Guest list exporters.
"""

from .excel_exporter import export_guest_list, COLUMNS, SHEET_NAME

__all__ = ['export_guest_list', 'COLUMNS', 'SHEET_NAME']
