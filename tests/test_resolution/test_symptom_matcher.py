"""
Tests for symptom matching.

Copyright (c) 2024 Cleansheet LLC
License: CC BY 4.0
"""

from unittest.mock import MagicMock

import pytest

from tm2_terminology.resolution.symptom_matcher import (
    SymptomMatcher,
    escape_query,
    join_terms,
)
from tm2_terminology.store.memory_store import MemoryRecordStore


class TestQueryHelpers:
    """Tests for query escaping and flattening."""

    def test_escape_query(self):
        """Test metacharacters are escaped."""
        assert escape_query("a(b)c") == r"a\(b\)c"
        assert escape_query("fever.*") == r"fever\.\*"

    def test_join_terms(self):
        """Test terms are joined with comma and space."""
        assert join_terms(["fever", "headache"]) == "fever, headache"
        assert join_terms(["cough"]) == "cough"


class TestSymptomMatcher:
    """Tests for SymptomMatcher."""

    @pytest.mark.parametrize("query", ["", " ", "a", " b ", None])
    def test_short_query_returns_empty(self, query):
        """Test queries under two characters never reach the store."""
        store = MagicMock()

        assert SymptomMatcher(store).match(query) == []
        store.free_text_search.assert_not_called()

    def test_query_is_trimmed_and_escaped(self):
        """Test the store receives the escaped, trimmed query."""
        store = MagicMock()
        store.free_text_search.return_value = []

        SymptomMatcher(store).match("  fever.*  ")

        store.free_text_search.assert_called_once_with(r"fever\.\*")

    def test_literal_wildcard(self, make_record):
        """Test ``fever.*`` only matches the literal text."""
        store = MemoryRecordStore([
            make_record("A", local_description="fever with chills"),
            make_record("B", local_description="see fever.* notes"),
        ])

        records = SymptomMatcher(store).match("fever.*")

        assert [r.local_code for r in records] == ["B"]

    def test_literal_parentheses(self, make_record):
        """Test parentheses are matched verbatim."""
        store = MemoryRecordStore([
            make_record("A", local_description="abc"),
            make_record("B", local_description="type a(b)c pain"),
        ])

        records = SymptomMatcher(store).match("a(b)c")

        assert [r.local_code for r in records] == ["B"]

    def test_case_insensitive(self, memory_store):
        """Test matching ignores case."""
        records = SymptomMatcher(memory_store).match("HEADACHE")

        assert {r.local_code for r in records} == {"SID-14", "SID-30"}

    def test_no_confidence_threshold(self, make_record):
        """Test low-confidence and unmapped records are still returned."""
        store = MemoryRecordStore([
            make_record("A", local_description="fever", target_code="T1", confidence_score=0.2),
            make_record("B", local_description="fever"),
        ])

        records = SymptomMatcher(store).match("fever")

        assert {r.local_code for r in records} == {"A", "B"}

    def test_matches_target_definition(self, memory_store):
        """Test TM2 definitions are searched."""
        records = SymptomMatcher(memory_store).match("raised body")

        assert {r.local_code for r in records} == {"AAA-1", "SID-14"}

    def test_custom_min_length(self):
        """Test configured minimum length."""
        store = MagicMock()

        assert SymptomMatcher(store, min_query_length=4).match("abc") == []
        store.free_text_search.assert_not_called()

    def test_match_terms_joins_before_escaping(self):
        """Test term lists are searched as one joined literal."""
        store = MagicMock()
        store.free_text_search.return_value = []

        SymptomMatcher(store).match_terms(["fever", "chills"])

        store.free_text_search.assert_called_once_with(escape_query("fever, chills"))
