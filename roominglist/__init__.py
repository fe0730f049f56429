"""
Rooming List reconciliation system.

Turns OCR text from travel-agency booking emails into a reconciled guest
roster and the statistics, chart series and guest list built from it.
"""

__version__ = "1.0.0"
__author__ = "Rooming List Team"
__description__ = "Booking snapshot reconciliation and roster analytics"
