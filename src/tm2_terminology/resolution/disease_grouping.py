"""
Disease Grouping

Cluster symptom-search candidates into TM2 disease groups and rank them.

Each group takes its title, definition and similarity score from the first
member encountered, not from its best member. Unmapped candidates are dropped
before groups are counted against the overflow limit.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable

from tm2_terminology.resolution.symptom_matcher import SymptomMatcher, join_terms
from tm2_terminology.store.record_types import CodeRecord

MAX_DISEASE_GROUPS = 20


class GroupingOutcome(str, Enum):
    """Terminal outcomes of a grouped symptom search."""

    NO_SYMPTOMS = "no_symptoms"
    NO_MATCHES = "no_matches"
    TOO_MANY_GROUPS = "too_many_groups"
    GROUPED = "grouped"


@dataclass(frozen=True)
class DiseaseGroup:
    """Symptom matches sharing one TM2 code."""

    target_code: str
    target_title: str | None
    target_definition: str | None
    similarity_score: float | None
    members: tuple[CodeRecord, ...] = ()

    @property
    def mapping_count(self) -> int:
        return len(self.members)

    @property
    def rank_score(self) -> float:
        return self.similarity_score if self.similarity_score is not None else 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "tm2Code": self.target_code,
            "tm2Title": self.target_title,
            "tm2Definition": self.target_definition,
            "similarityScore": self.similarity_score,
            "mappingCount": self.mapping_count,
            "mappings": [m.to_dict() for m in self.members],
        }


@dataclass(frozen=True)
class GroupedResult:
    """Tagged result of ``DiseaseGrouper.group``."""

    kind: GroupingOutcome
    matched_symptoms: str = ""
    groups: tuple[DiseaseGroup, ...] = field(default_factory=tuple)
    group_count: int = 0
    max_groups: int = MAX_DISEASE_GROUPS

    @classmethod
    def no_symptoms(cls) -> "GroupedResult":
        return cls(GroupingOutcome.NO_SYMPTOMS)

    @classmethod
    def no_matches(cls, matched_symptoms: str) -> "GroupedResult":
        return cls(GroupingOutcome.NO_MATCHES, matched_symptoms)

    @classmethod
    def too_many_groups(cls, count: int, matched_symptoms: str, max_groups: int) -> "GroupedResult":
        return cls(
            GroupingOutcome.TOO_MANY_GROUPS,
            matched_symptoms,
            group_count=count,
            max_groups=max_groups,
        )

    @classmethod
    def grouped(cls, groups: Iterable[DiseaseGroup], matched_symptoms: str,
                max_groups: int) -> "GroupedResult":
        groups = tuple(groups)
        return cls(
            GroupingOutcome.GROUPED,
            matched_symptoms,
            groups=groups,
            group_count=len(groups),
            max_groups=max_groups,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "outcome": self.kind.value,
            "matchedSymptoms": self.matched_symptoms,
            "groupCount": self.group_count,
            "maxGroups": self.max_groups,
            "groups": [g.to_dict() for g in self.groups],
        }


def group_by_target(candidates: Iterable[CodeRecord]) -> list[DiseaseGroup]:
    """Group mapped candidates by TM2 code, in first-seen order."""
    members: dict[str, list[CodeRecord]] = {}
    for record in candidates:
        if not record.is_mapped:
            continue
        members.setdefault(record.target_code, []).append(record)

    groups = []
    for target_code, records in members.items():
        first = records[0]
        groups.append(
            DiseaseGroup(
                target_code=target_code,
                target_title=first.target_title,
                target_definition=first.target_definition,
                similarity_score=first.confidence_score,
                members=tuple(records),
            )
        )
    return groups


def rank_groups(groups: Iterable[DiseaseGroup]) -> list[DiseaseGroup]:
    """Sort by similarity descending; stable, so ties keep first-seen order."""
    return sorted(groups, key=lambda g: g.rank_score, reverse=True)


class DiseaseGrouper:
    """Group symptom matches into ranked disease groups."""

    def __init__(self, matcher: SymptomMatcher, max_groups: int = MAX_DISEASE_GROUPS):
        self.matcher = matcher
        self.max_groups = max_groups

    def group(self, symptoms: list[str] | None) -> GroupedResult:
        if not symptoms:
            return GroupedResult.no_symptoms()

        matched_symptoms = join_terms(symptoms)
        candidates = self.matcher.match(matched_symptoms)
        if not candidates:
            return GroupedResult.no_matches(matched_symptoms)

        groups = rank_groups(group_by_target(candidates))

        if len(groups) > self.max_groups:
            return GroupedResult.too_many_groups(len(groups), matched_symptoms, self.max_groups)

        return GroupedResult.grouped(groups, matched_symptoms, self.max_groups)
