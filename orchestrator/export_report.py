"""Outcome summary of an export run."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional


@dataclass
class ExportReport:
    """Counts and details of exported and failed posts."""

    total: int = 0
    exported: List[Path] = field(default_factory=list)
    failures: List[Dict[str, str]] = field(default_factory=list)
    duration: float = 0.0

    @property
    def success(self) -> bool:
        """True when no post failed."""
        return not self.failures

    def add_exported(self, path: Path) -> None:
        self.exported.append(Path(path))

    def add_failure(self, slug: str, error: str) -> None:
        self.failures.append({'slug': slug, 'error': error})

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total': self.total,
            'exported': len(self.exported),
            'failed': len(self.failures),
            'duration': round(self.duration, 2),
            'failures': list(self.failures),
        }

    def log_summary(self, logger: Optional[logging.Logger] = None) -> None:
        """Log totals, then one line per failed post."""
        logger = logger or logging.getLogger('wordpress_markdown_exporter.orchestrator')

        if self.success:
            logger.info(
                f"Successfully exported {len(self.exported)}/{self.total} posts "
                f"in {self.duration:.2f}s"
            )
            return

        logger.warning(
            f"Exported {len(self.exported)}/{self.total} posts, "
            f"{len(self.failures)} failed ({self.duration:.2f}s)"
        )
        for failure in self.failures:
            logger.warning(f"  - {failure['slug']}: {failure['error']}")


__all__ = ['ExportReport']
