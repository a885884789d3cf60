"""
Direct Lookups

Auto-complete, category listing and one-to-one code translation over the
record store.
"""

from tm2_terminology.errors import InvalidInputError
from tm2_terminology.resolution.symptom_matcher import MIN_QUERY_LENGTH
from tm2_terminology.store.base import RecordStore
from tm2_terminology.store.record_types import CodeRecord

DEFAULT_AUTOCOMPLETE_LIMIT = 10


class TerminologyLookup:
    """Plain read paths sharing the resolution engine's store."""

    def __init__(
        self,
        store: RecordStore,
        min_query_length: int = MIN_QUERY_LENGTH,
        autocomplete_limit: int = DEFAULT_AUTOCOMPLETE_LIMIT,
    ):
        self.store = store
        self.min_query_length = min_query_length
        self.autocomplete_limit = autocomplete_limit

    def autocomplete(self, term: str | None, limit: int | None = None) -> list[CodeRecord]:
        """Title suggestions for an EMR search box."""
        limit = self.autocomplete_limit if limit is None else limit
        if limit < 1:
            raise InvalidInputError(f"limit must be positive, got {limit}")

        trimmed = (term or "").strip()
        if len(trimmed) < self.min_query_length:
            return []

        return self.store.find_by_title_prefix(trimmed)[:limit]

    def get_by_local_code(self, code: str) -> CodeRecord | None:
        return self.store.find_by_local_code(code.strip())

    def get_by_category(self, category: str) -> list[CodeRecord]:
        return self.store.find_by_category(category.strip().lower())

    def translate_to_target(self, code: str) -> str | None:
        """TM2 code mapped to a NAMASTE code, if any."""
        record = self.get_by_local_code(code)
        if record is None or not record.is_mapped:
            return None
        return record.target_code

    def find_by_target_code(self, code: str) -> CodeRecord | None:
        """Reverse translation from a TM2 code."""
        return self.store.find_by_target_code(code.strip())

    def list_codes(self) -> list[CodeRecord]:
        return self.store.find_all()
