"""Export services for property evaluations.

Writes evaluations to JSON files for persistence and debugging.
"""

from __future__ import annotations

import json
import os
from datetime import datetime
from typing import Any

from multiflow.core.logging import get_logger

from .evaluation import PropertyEvaluation

log = get_logger(__name__)


class EvaluationExporter:
    """Handles exporting of property evaluations."""

    def __init__(self, output_dir: str = "results"):
        """Initialize exporter.

        Args:
            output_dir: Directory where exports will be saved.
        """
        self.output_dir = output_dir
        self._ensure_dir()

    def _ensure_dir(self) -> None:
        if not os.path.exists(self.output_dir):
            os.makedirs(self.output_dir, exist_ok=True)
            log.info("created_output_directory", path=self.output_dir)

    @staticmethod
    def to_payload(
        evaluations: list[PropertyEvaluation],
        metadata: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        return {
            "metadata": {
                "timestamp": datetime.now().isoformat(),
                "count": len(evaluations),
                **(metadata or {}),
            },
            "evaluations": [e.model_dump(mode="json") for e in evaluations],
        }

    def save(
        self,
        evaluations: list[PropertyEvaluation],
        prefix: str = "evaluation",
        metadata: dict[str, Any] | None = None,
    ) -> str:
        """Save evaluations to a timestamped JSON file.

        Args:
            evaluations: Evaluations to export.
            prefix: Filename prefix.
            metadata: Optional metadata to include (e.g. profile used).

        Returns:
            Path to the saved file.
        """
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        filepath = os.path.join(self.output_dir, f"{prefix}_{timestamp}.json")
        payload = self.to_payload(evaluations, metadata)

        try:
            with open(filepath, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, ensure_ascii=False)
        except OSError as e:
            log.error("evaluation_export_failed", path=filepath, error=str(e))
            raise

        log.info("evaluations_saved", path=filepath, count=len(evaluations))
        return filepath
