"""
HTTP API for the reconciled roster.
"""
