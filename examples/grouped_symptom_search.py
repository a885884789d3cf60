#!/usr/bin/env python3
"""
Grouped Symptom Search Example

Groups symptom matches into TM2 disease groups and renders them as a FHIR
Parameters resource.

Usage:
    python examples/grouped_symptom_search.py fever
"""

import sys

from tm2_terminology import GroupingOutcome, TerminologyEngine
from tm2_terminology.fhir import ParametersFormatter


def main():
    symptoms = sys.argv[1:] or ["fever"]

    engine = TerminologyEngine.from_config("configs/local.yaml")
    result = engine.group_symptom_matches(symptoms)

    if result.kind == GroupingOutcome.GROUPED:
        for group in result.groups:
            print(f"{group.target_code}  {group.target_title}  "
                  f"score={group.similarity_score}  members={group.mapping_count}")
    elif result.kind == GroupingOutcome.TOO_MANY_GROUPS:
        print(f"{result.group_count} disease groups - refine your symptoms")
    else:
        print(f"No disease groups ({result.kind.value})")

    formatter = ParametersFormatter()
    print(formatter.to_json(formatter.symptom_search(result)))


if __name__ == "__main__":
    main()
