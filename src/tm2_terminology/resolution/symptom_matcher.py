"""
Symptom Matching

Free-text symptom search over record descriptions and TM2 definitions.

The query is always passed to the store as an escaped literal, so text such
as ``fever.*`` or ``a(b)c`` is matched verbatim and never interpreted as a
pattern. No confidence threshold applies on this path.
"""

import re
from typing import Iterable

from tm2_terminology.store.base import RecordStore
from tm2_terminology.store.record_types import CodeRecord

MIN_QUERY_LENGTH = 2
TERM_SEPARATOR = ", "


def escape_query(text: str) -> str:
    """Escape regular-expression metacharacters."""
    return re.escape(text)


def join_terms(terms: Iterable[str]) -> str:
    """Flatten a list of symptom terms into one query string."""
    return TERM_SEPARATOR.join(terms)


class SymptomMatcher:
    """Match symptom text to candidate records."""

    def __init__(self, store: RecordStore, min_query_length: int = MIN_QUERY_LENGTH):
        self.store = store
        self.min_query_length = min_query_length

    def match(self, query: str | None) -> list[CodeRecord]:
        """Records whose description or definition contains ``query``."""
        trimmed = (query or "").strip()
        if len(trimmed) < self.min_query_length:
            return []

        return self.store.free_text_search(escape_query(trimmed))

    def match_terms(self, terms: Iterable[str]) -> list[CodeRecord]:
        """Match a list of symptom terms as a single joined query."""
        return self.match(join_terms(terms))
