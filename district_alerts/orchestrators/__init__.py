"""
Orchestrators for District Alerts.

This module contains the pipeline orchestrator that drives
boundary, feed, filter and ranking for one district.
"""

from .pipeline import AlertPipeline, AlertState

__all__ = ["AlertPipeline", "AlertState"]
