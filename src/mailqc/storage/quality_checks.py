"""Quality check persistence with upsert-by-id semantics."""

from __future__ import annotations

from typing import Optional

from ..models.quality import QualityCheck, SaveResult
from ..utils.log import get_logger
from .store import KeyValueStore, read_json, write_json

logger = get_logger(__name__)

CHECKS_KEY = "quality_check_results"


class QualityCheckRepository:
    def __init__(self, store: KeyValueStore):
        self.store = store

    def _raw(self) -> list:
        raw = read_json(self.store, CHECKS_KEY, [])
        if not isinstance(raw, list):
            logger.error("Expected a list under %s, got %s", CHECKS_KEY, type(raw).__name__)
            return []
        return raw

    def get_quality_checks(self) -> list[QualityCheck]:
        """All stored checks, newest first."""
        checks: list[QualityCheck] = []
        for item in self._raw():
            try:
                checks.append(QualityCheck.model_validate(item))
            except ValueError as e:
                logger.warning("Skipping invalid quality check record: %s", e)
        return checks

    def get_quality_check(self, check_id: str) -> Optional[QualityCheck]:
        return next((c for c in self.get_quality_checks() if c.id == check_id), None)

    def get_checks_for_agent(self, agent_id: str) -> list[QualityCheck]:
        return [c for c in self.get_quality_checks() if c.agent_id == agent_id]

    def save_quality_check(self, check: QualityCheck) -> SaveResult:
        """Replace the check with the same id in place, or prepend a new one."""
        records = self._raw()
        record = check.to_json_dict()

        index = next(
            (i for i, r in enumerate(records) if isinstance(r, dict) and r.get("id") == check.id),
            None,
        )
        if index is not None:
            records[index] = record
        else:
            records.insert(0, record)

        if not write_json(self.store, CHECKS_KEY, records):
            logger.error("Failed to save quality check %s", check.id)
            return SaveResult(success=False, result=None)
        return SaveResult(success=True, result=check)
