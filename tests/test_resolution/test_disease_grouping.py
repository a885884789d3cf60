"""
Tests for disease grouping.

Copyright (c) 2024 Cleansheet LLC
License: CC BY 4.0
"""

from unittest.mock import MagicMock

import pytest

from tm2_terminology.resolution.disease_grouping import (
    DiseaseGroup,
    DiseaseGrouper,
    GroupedResult,
    GroupingOutcome,
    group_by_target,
    rank_groups,
)
from tm2_terminology.resolution.symptom_matcher import SymptomMatcher
from tm2_terminology.store.memory_store import MemoryRecordStore


def _grouper(records, **kwargs) -> DiseaseGrouper:
    return DiseaseGrouper(SymptomMatcher(MemoryRecordStore(records)), **kwargs)


class TestGroupByTarget:
    """Tests for grouping candidates by TM2 code."""

    def test_first_member_is_representative(self, make_record):
        """Test group metadata comes from the first member, not the best."""
        records = [
            make_record("A", target_code="T1", target_title="First", confidence_score=0.5),
            make_record("B", target_code="T1", target_title="Second", confidence_score=0.9),
        ]

        groups = group_by_target(records)

        assert len(groups) == 1
        assert groups[0].target_title == "First"
        assert groups[0].similarity_score == 0.5
        assert groups[0].mapping_count == 2

    def test_unmapped_dropped(self, make_record):
        """Test records without a TM2 code never form a group."""
        records = [
            make_record("A", target_code=None),
            make_record("B", target_code="  "),
            make_record("C", target_code="T1"),
        ]

        assert [g.target_code for g in group_by_target(records)] == ["T1"]

    def test_first_seen_order(self, make_record):
        """Test groups are created in first-seen order."""
        records = [
            make_record("A", target_code="T2"),
            make_record("B", target_code="T1"),
            make_record("C", target_code="T2"),
        ]

        assert [g.target_code for g in group_by_target(records)] == ["T2", "T1"]


class TestRankGroups:
    """Tests for group ranking."""

    def test_descending_and_stable(self):
        """Test ties keep their original order."""
        groups = [
            DiseaseGroup("T1", None, None, 0.5),
            DiseaseGroup("T2", None, None, 0.9),
            DiseaseGroup("T3", None, None, 0.5),
        ]

        assert [g.target_code for g in rank_groups(groups)] == ["T2", "T1", "T3"]

    def test_absent_score_ranks_as_zero(self):
        """Test groups without a score sort last."""
        groups = [
            DiseaseGroup("T1", None, None, None),
            DiseaseGroup("T2", None, None, 0.1),
        ]

        ranked = rank_groups(groups)

        assert [g.target_code for g in ranked] == ["T2", "T1"]
        assert ranked[1].similarity_score is None


class TestDiseaseGrouper:
    """Tests for DiseaseGrouper.group."""

    @pytest.mark.parametrize("symptoms", [None, []])
    def test_no_symptoms(self, symptoms):
        """Test empty symptom lists short-circuit."""
        matcher = MagicMock()

        result = DiseaseGrouper(matcher).group(symptoms)

        assert result.kind is GroupingOutcome.NO_SYMPTOMS
        matcher.match.assert_not_called()

    def test_no_matches(self, memory_store):
        """Test zero candidates gives NO_MATCHES with the joined query."""
        result = DiseaseGrouper(SymptomMatcher(memory_store)).group(["xyzzy", "plugh"])

        assert result.kind is GroupingOutcome.NO_MATCHES
        assert result.matched_symptoms == "xyzzy, plugh"

    def test_grouped_scenario(self, make_record):
        """Test two targets ranked by first-member score."""
        grouper = _grouper([
            make_record("L1", local_description="fever", target_code="T1", confidence_score=0.7),
            make_record("L2", local_description="fever", target_code="T2", confidence_score=0.9),
            make_record("L3", local_description="fever", target_code="T1", confidence_score=0.8),
        ])

        result = grouper.group(["fever"])

        assert result.kind is GroupingOutcome.GROUPED
        assert [g.target_code for g in result.groups] == ["T2", "T1"]
        assert [g.similarity_score for g in result.groups] == [0.9, 0.7]
        assert [g.mapping_count for g in result.groups] == [1, 2]
        assert result.group_count == 2
        assert result.matched_symptoms == "fever"

    def test_too_many_groups(self, make_record):
        """Test 21 distinct targets overflow the default limit."""
        grouper = _grouper([
            make_record(f"L{i}", local_description="fever", target_code=f"T{i}", confidence_score=0.7)
            for i in range(21)
        ])

        result = grouper.group(["fever"])

        assert result.kind is GroupingOutcome.TOO_MANY_GROUPS
        assert result.group_count == 21
        assert result.max_groups == 20
        assert result.groups == ()

    def test_exactly_at_limit(self, make_record):
        """Test 20 groups are still returned."""
        grouper = _grouper([
            make_record(f"L{i}", local_description="fever", target_code=f"T{i}", confidence_score=0.7)
            for i in range(20)
        ])

        result = grouper.group(["fever"])

        assert result.kind is GroupingOutcome.GROUPED
        assert result.group_count == 20

    def test_unmapped_not_counted_against_limit(self, make_record):
        """Test unmapped candidates don't push the count over the limit."""
        records = [
            make_record(f"L{i}", local_description="fever", target_code=f"T{i}")
            for i in range(2)
        ] + [make_record(f"U{i}", local_description="fever") for i in range(5)]

        result = _grouper(records, max_groups=2).group(["fever"])

        assert result.kind is GroupingOutcome.GROUPED
        assert result.group_count == 2

    def test_all_unmapped(self, memory_store):
        """Test only unmapped matches yield an empty grouped result."""
        result = DiseaseGrouper(SymptomMatcher(memory_store)).group(["cold"])

        assert result.kind is GroupingOutcome.GROUPED
        assert result.groups == ()

    def test_terms_joined_as_literal(self, make_record):
        """Test multiple terms match only the joined phrase."""
        grouper = _grouper([
            make_record("A", local_description="fever, chills", target_code="T1"),
            make_record("B", local_description="fever and chills", target_code="T2"),
        ])

        result = grouper.group(["fever", "chills"])

        assert [g.target_code for g in result.groups] == ["T1"]


class TestGroupedResult:
    """Tests for result serialization."""

    def test_to_dict(self, make_record):
        """Test dictionary form of a grouped result."""
        member = make_record("A", target_code="T1", target_title="Fever", confidence_score=0.8)
        group = DiseaseGroup("T1", "Fever", None, 0.8, (member,))

        data = GroupedResult.grouped([group], "fever", 20).to_dict()

        assert data["outcome"] == "grouped"
        assert data["groupCount"] == 1
        assert data["groups"][0]["tm2Code"] == "T1"
        assert data["groups"][0]["mappingCount"] == 1
        assert data["groups"][0]["mappings"][0]["code"] == "A"

    def test_too_many_to_dict(self):
        """Test overflow results carry the count and no groups."""
        data = GroupedResult.too_many_groups(25, "fever", 20).to_dict()

        assert data["outcome"] == "too_many_groups"
        assert data["groupCount"] == 25
        assert data["groups"] == []
