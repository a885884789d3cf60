"""
Record Store Interface

The narrow query surface the resolution engine consumes. Implementations must
be safe for concurrent reads and must raise ``StoreError`` for any backend
fault, including timeouts. Finding nothing is not a fault.
"""

from typing import Protocol, runtime_checkable

from tm2_terminology.store.record_types import CodeRecord


@runtime_checkable
class RecordStore(Protocol):
    """Read-only access to coded records."""

    def find_by_local_code(self, code: str) -> CodeRecord | None:
        """Record with this exact local code, highest confidence first."""
        ...

    def find_by_any_code(self, code: str) -> list[CodeRecord]:
        """Records whose local code or target code equals ``code``."""
        ...

    def find_by_category(self, category: str) -> list[CodeRecord]:
        ...

    def find_by_title_prefix(self, term: str) -> list[CodeRecord]:
        """Records whose title starts with, then contains, ``term``."""
        ...

    def free_text_search(self, escaped_literal: str) -> list[CodeRecord]:
        """Case-insensitive match over description and target definition."""
        ...

    def find_by_target_code(self, code: str) -> CodeRecord | None:
        ...

    def find_all(self) -> list[CodeRecord]:
        """All records ordered by local title."""
        ...
