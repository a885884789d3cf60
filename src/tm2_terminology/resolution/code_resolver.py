"""
Code Resolution

Resolve an input code (NAMASTE or ICD-11 TM2) to the canonical records it
identifies.

Flow:
    input code → best local-code record → pivot to its TM2 code → broad
    lookup on local or TM2 code → confidence filter → best record per category
"""

from functools import reduce
from typing import Iterable

from tm2_terminology.errors import InvalidInputError
from tm2_terminology.store.base import RecordStore
from tm2_terminology.store.record_types import CodeRecord

DEFAULT_CONFIDENCE_THRESHOLD = 0.6


def passes_confidence(record: CodeRecord, threshold: float = DEFAULT_CONFIDENCE_THRESHOLD) -> bool:
    """Strictly above threshold; records without a score never pass."""
    return record.confidence_score is not None and record.confidence_score > threshold


def _keep_best(
    best: dict[str | None, CodeRecord], record: CodeRecord
) -> dict[str | None, CodeRecord]:
    current = best.get(record.category)
    # First seen wins on exact ties
    if current is None or current.confidence_score < record.confidence_score:
        return {**best, record.category: record}
    return best


def best_per_category(records: Iterable[CodeRecord]) -> list[CodeRecord]:
    """Highest-confidence record for each category, in first-seen order.

    Records must already carry a confidence score.
    """
    return list(reduce(_keep_best, records, {}).values())


class CodeResolver:
    """Resolve codes to confidence-filtered, per-category best records."""

    def __init__(
        self,
        store: RecordStore,
        confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD,
        strict_input: bool = False,
    ):
        self.store = store
        self.confidence_threshold = confidence_threshold
        self.strict_input = strict_input

    def search_key(self, code: str) -> str:
        """Pivot a mapped local code to its TM2 code; other codes pass through."""
        local = self.store.find_by_local_code(code)
        if local is not None and local.is_mapped:
            return local.target_code.strip()
        return code

    def resolve(self, code: str | None) -> list[CodeRecord]:
        """Resolve ``code`` to at most one record per category.

        Blank input yields an empty list unless the resolver is strict.
        Store faults propagate.
        """
        trimmed = (code or "").strip()
        if not trimmed:
            if self.strict_input:
                raise InvalidInputError("Code value must not be blank")
            return []

        key = self.search_key(trimmed)

        candidates = self.store.find_by_any_code(key)
        if not candidates:
            return []

        confident = [
            r for r in candidates
            if passes_confidence(r, self.confidence_threshold)
        ]
        return best_per_category(confident)
