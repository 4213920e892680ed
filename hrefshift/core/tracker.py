"""
Tracking of hrefs a rewrite had to leave untouched.

The engine degrades to returning an href as is when it cannot be parsed.
RewriteTracker keeps a record of each such href together with the pair of
base URLs it was being moved between, so a batch caller can report them
after the run.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Dict, List, Any, Optional


@dataclass
class RewriteWarning:
    id: str
    href: str
    old_base_url: str
    new_base_url: str
    type: str
    message: str
    timestamp: datetime = field(default_factory=datetime.now)


class RewriteTracker:
    def __init__(self, old_base_url: str, new_base_url: str, logger: Optional[logging.Logger] = None):
        self.old_base_url = old_base_url
        self.new_base_url = new_base_url
        self.logger = logger or logging.getLogger(__name__)
        self.warnings: List[RewriteWarning] = []
        self._lock = threading.Lock()

    def log_warning(self, href: str, error: Exception) -> str:
        """
        Record an href that was left unrewritten.

        Args:
            href: The href as found in the document
            error: Why it could not be rewritten

        Returns:
            Warning ID for tracking
        """
        with self._lock:
            warning_id = f"WARN_{datetime.now().strftime('%Y%m%d_%H%M%S')}_{len(self.warnings):03d}"
            self.warnings.append(RewriteWarning(
                id=warning_id,
                href=href,
                old_base_url=self.old_base_url,
                new_base_url=self.new_base_url,
                type=type(error).__name__,
                message=str(error),
            ))

        self.logger.warning(
            f"[{warning_id}] Left href {href!r} as is: {type(error).__name__}: {error} "
            f"(Bases: {self.old_base_url} -> {self.new_base_url})"
        )
        return warning_id

    def get_summary(self) -> Dict[str, Any]:
        with self._lock:
            warnings = list(self.warnings)
        type_counts: Dict[str, int] = {}
        for w in warnings:
            type_counts[w.type] = type_counts.get(w.type, 0) + 1
        return {
            'total_warnings': len(warnings),
            'warning_types': type_counts,
            'recent_warnings': [asdict(w) for w in warnings[-5:]],
        }
