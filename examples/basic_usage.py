#!/usr/bin/env python3
"""
Basic Usage Example

Demonstrates code resolution and symptom search over the sample records.

Usage:
    python examples/basic_usage.py

Requirements:
    - pip install -e .
"""

from tm2_terminology import TerminologyEngine


def main():
    # Create engine from the local config (in-memory sample records)
    engine = TerminologyEngine.from_config("configs/local.yaml")

    # A NAMASTE code pivots to its TM2 code, then returns the best
    # confident record per traditional medicine system
    for record in engine.resolve_by_code("AAA-1"):
        print(f"{record.category:10} {record.local_code:8} -> {record.target_code} "
              f"({record.confidence_score})")

    # Symptom text is matched literally against descriptions and definitions
    matches = engine.match_by_symptoms("headache")
    print(f"\n--- {len(matches)} records mention 'headache' ---")
    for record in matches:
        print(f"{record.local_code:8} {record.local_description}")


if __name__ == "__main__":
    main()
