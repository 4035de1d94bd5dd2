"""Shared fixtures for MailQC tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from mailqc.models.quality import QualityCheck, ScoreResult
from mailqc.storage import AgentRepository, MemoryStore, QualityCheckRepository, SettingsRepository

GOOD_EMAIL = """Dear John,

Thank you for contacting the Claims Department about your flight.
We have reviewed your case. Please find the next steps below.
Send us your boarding pass. We will then process your claim.

Kind regards,
Sarah Smith
Air Travel Claim - www.airtravelclaim.co.uk
"""

POOR_EMAIL = "hey there, i'm gonna help you ASAP!!"

MY_LAW_MATTERS_EMAIL = """MY LAW MATTERS
Making Law Simple

Dear John,

Our Ref: MLM-1234

Please find attached the signed agreement.

Kind Regards,
Anna Jones
My Law Matters
E | anna@mylawmatters.co.uk
My Law Matters is a trading style of Example Legal Ltd. Company Number 1234567.
THIS EMAIL AND ANY ATTACHMENTS ARE CONFIDENTIAL
"""


class FakeClock:
    """Deterministic replacement for time.time that advances 1ms per call."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        self.now += 0.001
        return self.now


@pytest.fixture
def good_email() -> str:
    return GOOD_EMAIL


@pytest.fixture
def poor_email() -> str:
    return POOR_EMAIL


@pytest.fixture
def mlm_email() -> str:
    return MY_LAW_MATTERS_EMAIL


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def agents_repo(memory_store: MemoryStore, clock: FakeClock) -> AgentRepository:
    return AgentRepository(memory_store, clock=clock)


@pytest.fixture
def checks_repo(memory_store: MemoryStore) -> QualityCheckRepository:
    return QualityCheckRepository(memory_store)


@pytest.fixture
def settings_repo(memory_store: MemoryStore) -> SettingsRepository:
    return SettingsRepository(memory_store)


@pytest.fixture
def make_check():
    """Factory for quality checks with one score per criterion."""

    def _make(
        check_id: str = "qc-1",
        agent_id: str = "agent-1",
        agent_name: str = "Jane Doe",
        scores: tuple[int, int, int, int] = (8, 6, 9, 7),
        overall: float = 8,
        date: str = "2024-05-01T10:00:00+00:00",
    ) -> QualityCheck:
        return QualityCheck(
            id=check_id,
            agent_id=agent_id,
            agent_name=agent_name,
            email_subject="Your claim",
            reviewer_id="reviewer",
            date=date,
            email_content="Hello",
            scores=[
                ScoreResult(criteria_id=cid, score=value, feedback="")
                for cid, value in zip(("tone", "clarity", "spelling-grammar", "structure"), scores)
            ],
            overall_score=overall,
        )

    return _make


@pytest.fixture
def tmp_project(tmp_path: Path) -> Path:
    project = tmp_path / "test-project"
    project.mkdir()
    return project


@pytest.fixture
def initialized_project(tmp_project: Path) -> Path:
    """Create a project with .mailqc initialized."""
    qc_dir = tmp_project / ".mailqc"
    qc_dir.mkdir()
    (qc_dir / "storage").mkdir()
    (qc_dir / "config.yaml").write_text(
        'project:\n  name: "test-project"\n\nreviewer:\n  id: "qa-lead"\n',
        encoding="utf-8",
    )
    return tmp_project
