"""
Orchestration package for coordinating the export pipeline.

This package sequences the per-post phases: Assets → Convert → Frontmatter →
Write, and reports the outcome of the run.
"""

from .export_orchestrator import ExportOrchestrator, ExportSetupError
from .export_report import ExportReport

__all__ = [
    'ExportOrchestrator',
    'ExportReport',
    'ExportSetupError',
]
