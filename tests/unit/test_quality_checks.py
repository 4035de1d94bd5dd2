"""Tests for storage/quality_checks.py."""

from __future__ import annotations

import json

from mailqc.storage.quality_checks import CHECKS_KEY, QualityCheckRepository
from mailqc.storage.store import MemoryStore


class TestQualityCheckRepository:
    def test_save_new_prepends(self, checks_repo: QualityCheckRepository, make_check):
        checks_repo.save_quality_check(make_check("qc-1"))
        result = checks_repo.save_quality_check(make_check("qc-2"))
        assert result.success
        assert result.result.id == "qc-2"
        assert [c.id for c in checks_repo.get_quality_checks()] == ["qc-2", "qc-1"]

    def test_upsert_replaces_in_place(self, checks_repo: QualityCheckRepository, make_check):
        checks_repo.save_quality_check(make_check("qc-1"))
        checks_repo.save_quality_check(make_check("qc-2"))
        checks_repo.save_quality_check(make_check("qc-1", overall=3))

        checks = checks_repo.get_quality_checks()
        assert [c.id for c in checks] == ["qc-2", "qc-1"]
        assert checks[1].overall_score == 3

    def test_save_twice_keeps_one(self, checks_repo: QualityCheckRepository, make_check):
        check = make_check("qc-1")
        checks_repo.save_quality_check(check)
        checks_repo.save_quality_check(check)
        assert len(checks_repo.get_quality_checks()) == 1

    def test_get_quality_check(self, checks_repo: QualityCheckRepository, make_check):
        checks_repo.save_quality_check(make_check("qc-1", agent_id="agent-7"))
        assert checks_repo.get_quality_check("qc-1").agent_id == "agent-7"
        assert checks_repo.get_quality_check("qc-404") is None

    def test_checks_for_agent(self, checks_repo: QualityCheckRepository, make_check):
        checks_repo.save_quality_check(make_check("qc-1", agent_id="a"))
        checks_repo.save_quality_check(make_check("qc-2", agent_id="b"))
        assert [c.id for c in checks_repo.get_checks_for_agent("a")] == ["qc-1"]

    def test_stored_with_camel_case_keys(self, checks_repo, memory_store: MemoryStore, make_check):
        checks_repo.save_quality_check(make_check("qc-1"))
        record = json.loads(memory_store.get_item(CHECKS_KEY))[0]
        assert record["agentId"] == "agent-1"
        assert record["overallScore"] == 8
        assert record["scores"][2]["criteriaId"] == "spelling-grammar"
        assert record["status"] == "completed"

    def test_write_failure(self, make_check):
        repo = QualityCheckRepository(MemoryStore(quota_bytes=10))
        result = repo.save_quality_check(make_check("qc-1"))
        assert result.success is False
        assert result.result is None

    def test_invalid_records_skipped(self, checks_repo, memory_store: MemoryStore, make_check):
        checks_repo.save_quality_check(make_check("qc-1"))
        records = json.loads(memory_store.get_item(CHECKS_KEY))
        records.append({"id": "broken", "scores": []})
        memory_store.set_item(CHECKS_KEY, json.dumps(records))
        assert [c.id for c in checks_repo.get_quality_checks()] == ["qc-1"]

    def test_non_list_payload(self, checks_repo, memory_store: MemoryStore):
        memory_store.set_item(CHECKS_KEY, '{"id": "qc-1"}')
        assert checks_repo.get_quality_checks() == []
