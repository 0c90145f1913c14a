"""
District Alerts: severe-weather CAP alerts filtered to one district boundary.
"""

__version__ = "0.1.0"
