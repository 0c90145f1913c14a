"""
Core domain models and pure functions for District Alerts.

This module contains the domain models and pure business logic
that are independent of external I/O and infrastructure concerns.
"""

from .models import Alert, BoundaryGeometry, CachedBoundary, FilterConfig, PipelineResult, RawAlertDocument
from .extract import extract
from .relevance import classify
from .ranker import rank

__all__ = [
    "Alert", "BoundaryGeometry", "CachedBoundary", "FilterConfig", "PipelineResult",
    "RawAlertDocument", "extract", "classify", "rank",
]
