"""
Pytest Configuration and Shared Fixtures

Copyright (c) 2024 Cleansheet LLC
License: CC BY 4.0
"""

from pathlib import Path
from typing import Any, Callable

import pytest
import yaml

from tm2_terminology.engine.config import EngineConfig
from tm2_terminology.engine.engine import TerminologyEngine
from tm2_terminology.store.memory_store import MemoryRecordStore
from tm2_terminology.store.record_types import CodeRecord


# =============================================================================
# RECORD FIXTURES
# =============================================================================


@pytest.fixture
def make_record() -> Callable[..., CodeRecord]:
    """Factory for records with sensible defaults."""
    counter = {"n": 0}

    def _make(local_code: str = "NAM001", **fields: Any) -> CodeRecord:
        counter["n"] += 1
        fields.setdefault("id", f"rec-{counter['n']:03d}")
        fields.setdefault("category", "ayurveda")
        return CodeRecord(local_code=local_code, **fields)

    return _make


@pytest.fixture
def sample_records() -> list[CodeRecord]:
    """Small mixed catalogue: mapped, unmapped and threshold records."""
    return [
        CodeRecord(
            id="rec-001",
            local_code="AAA-1",
            local_title="Jvara",
            local_description="Fever with body ache",
            category="ayurveda",
            target_code="SK00",
            target_title="Fever disorder (TM2)",
            target_definition="Pattern of raised body temperature",
            target_uri="http://id.who.int/icd/entity/1",
            confidence_score=0.92,
        ),
        CodeRecord(
            id="rec-002",
            local_code="SID-14",
            local_title="Suram",
            local_description="Fever with headache and chills",
            category="siddha",
            target_code="SK00",
            target_title="Fever disorder (TM2)",
            target_definition="Pattern of raised body temperature",
            confidence_score=0.81,
        ),
        CodeRecord(
            id="rec-003",
            local_code="UN-7",
            local_title="Humma",
            local_description="Fever of humoral origin",
            category="unani",
            target_code="SK00",
            target_title="Fever disorder (TM2)",
            confidence_score=0.6,
        ),
        CodeRecord(
            id="rec-004",
            local_code="AAB-3",
            local_title="Kasa",
            local_description="Cough with chest congestion",
            category="ayurveda",
            target_code="SL10",
            target_title="Cough disorder (TM2)",
            target_definition="Pattern of persistent cough",
            confidence_score=0.88,
        ),
        CodeRecord(
            id="rec-005",
            local_code="SID-30",
            local_title="Thalai Vali",
            local_description="Headache aggravated by cold",
            category="siddha",
        ),
    ]


@pytest.fixture
def memory_store(sample_records: list[CodeRecord]) -> MemoryRecordStore:
    """In-memory store over the sample records."""
    return MemoryRecordStore(sample_records)


@pytest.fixture
def engine(memory_store: MemoryRecordStore) -> TerminologyEngine:
    """Engine over the sample records, without hooks."""
    return TerminologyEngine(EngineConfig(), store=memory_store, hooks=[])


# =============================================================================
# FILE FIXTURES
# =============================================================================


@pytest.fixture
def records_file(tmp_path: Path, sample_records: list[CodeRecord]) -> Path:
    """YAML record file in wire format."""
    path = tmp_path / "records.yaml"
    path.write_text(yaml.safe_dump({"records": [r.to_dict() for r in sample_records]}))
    return path
