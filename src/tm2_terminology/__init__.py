"""
TM2 Terminology

Resolve NAMASTE traditional medicine codes and symptom text to ICD-11 TM2
codes.

Usage:
    from tm2_terminology import TerminologyEngine

    engine = TerminologyEngine.from_config("configs/local.yaml")
    records = engine.resolve_by_code("NAM001")
    result = engine.group_symptom_matches(["fever", "headache"])

Copyright (c) 2024 Cleansheet LLC
License: CC BY 4.0
"""

from tm2_terminology.engine.engine import TerminologyEngine
from tm2_terminology.engine.config import EngineConfig
from tm2_terminology.errors import InvalidInputError, StoreError, TerminologyError
from tm2_terminology.resolution.disease_grouping import (
    DiseaseGroup,
    GroupedResult,
    GroupingOutcome,
)
from tm2_terminology.store.record_types import Category, CodeRecord

__version__ = "0.1.0"

__all__ = [
    "TerminologyEngine",
    "EngineConfig",
    "CodeRecord",
    "Category",
    "DiseaseGroup",
    "GroupedResult",
    "GroupingOutcome",
    "TerminologyError",
    "InvalidInputError",
    "StoreError",
    "__version__",
]
