"""
Resolution Module

Code resolution, symptom matching and disease grouping.
"""

from tm2_terminology.resolution.code_resolver import CodeResolver, best_per_category
from tm2_terminology.resolution.symptom_matcher import SymptomMatcher, escape_query, join_terms
from tm2_terminology.resolution.disease_grouping import (
    DiseaseGroup,
    DiseaseGrouper,
    GroupedResult,
    GroupingOutcome,
)
from tm2_terminology.resolution.lookup import TerminologyLookup

__all__ = [
    "CodeResolver",
    "best_per_category",
    "SymptomMatcher",
    "escape_query",
    "join_terms",
    "DiseaseGroup",
    "DiseaseGrouper",
    "GroupedResult",
    "GroupingOutcome",
    "TerminologyLookup",
]
