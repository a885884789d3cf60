#!/usr/bin/env python3
"""
Custom Configuration Example

Demonstrates creating an engine with custom configuration programmatically
and observing operations through a hook.

Usage:
    python examples/custom_config.py
"""

from tm2_terminology import TerminologyEngine
from tm2_terminology.engine.config import (
    EngineConfig,
    LoggingConfig,
    ResolutionConfig,
    StoreConfig,
)
from tm2_terminology.engine.hooks import OperationEvent


def print_event(event: OperationEvent) -> None:
    print(f"[{event.operation}] {event.query!r} -> {event.outcome} "
          f"({event.result_count} results, {event.duration_ms:.2f}ms)")


def main():
    config = EngineConfig(
        name="strict-terminology",

        # Record store settings
        store=StoreConfig(
            backend="memory",
            data_file="data/sample_records.yaml",
        ),

        # Tighter policy than the defaults
        resolution=ResolutionConfig(
            confidence_threshold=0.8,
            max_disease_groups=5,
            strict_input=True,  # Blank codes raise InvalidInputError
        ),

        logging=LoggingConfig(log_operations=False),
    )

    engine = TerminologyEngine(config, hooks=[print_event])

    engine.resolve_by_code("SK00")
    engine.group_symptom_matches(["fever"])
    engine.autocomplete("kas")


if __name__ == "__main__":
    main()
