"""
Convergence run reporting.

Collects one result per converged resource so callers can tell which
resources changed the host.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List

from delivery_rust.core.filesystem import atomic_write

UPDATED = "updated"
UP_TO_DATE = "up_to_date"
WOULD_UPDATE = "would_update"
SKIPPED = "skipped"


@dataclass
class ResourceResult:
    """Outcome of converging a single resource."""

    resource: str
    resource_type: str
    status: str

    def to_dict(self) -> dict:
        return {
            "resource": self.resource,
            "type": self.resource_type,
            "status": self.status,
        }


@dataclass
class RunReport:
    """
    Results of one convergence run.

    Attributes:
        platform_family: Platform family the run targeted
        why_run: True if the run only tested resources
        results: Per-resource outcomes in converge order
    """

    platform_family: str
    why_run: bool = False
    results: List[ResourceResult] = field(default_factory=list)
    started_at: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )

    def add(self, resource, status: str) -> ResourceResult:
        result = ResourceResult(
            resource=resource.describe(),
            resource_type=resource.resource_type,
            status=status,
        )
        self.results.append(result)
        return result

    def count(self, status: str) -> int:
        return sum(1 for r in self.results if r.status == status)

    @property
    def updated_resources(self) -> List[str]:
        return [r.resource for r in self.results if r.status == UPDATED]

    def summary(self) -> Dict[str, int]:
        return {
            UPDATED: self.count(UPDATED),
            UP_TO_DATE: self.count(UP_TO_DATE),
            WOULD_UPDATE: self.count(WOULD_UPDATE),
            SKIPPED: self.count(SKIPPED),
        }

    def to_dict(self) -> dict:
        return {
            "platform_family": self.platform_family,
            "why_run": self.why_run,
            "started_at": self.started_at,
            "summary": self.summary(),
            "resources": [r.to_dict() for r in self.results],
        }

    def save(self, path: Path) -> None:
        """Write the report as JSON."""
        atomic_write(path, json.dumps(self.to_dict(), indent=2) + "\n")
