"""
In-Memory Record Store

Record store backed by a list of records, loaded from JSON or YAML.

Mirrors the query semantics of the terminology service's document store so
the engine behaves the same against either backend.
"""

import json
import re
from pathlib import Path
from typing import Any, Iterable

import yaml

from tm2_terminology.errors import StoreError
from tm2_terminology.store.record_types import CodeRecord


def _confidence_rank(record: CodeRecord) -> tuple[bool, float, str]:
    """Sort key placing the highest confidence first, absent scores last."""
    score = record.confidence_score
    return (score is None, -(score or 0.0), record.id)


def _parse_record(data: Any) -> CodeRecord:
    try:
        return CodeRecord.from_dict(data)
    except (TypeError, ValueError, AttributeError) as e:
        raise StoreError(f"Malformed record: {data!r}") from e


class MemoryRecordStore:
    """Record store over an in-memory list."""

    def __init__(self, records: Iterable[CodeRecord] = ()):
        self._records: tuple[CodeRecord, ...] = tuple(records)

    @classmethod
    def from_file(cls, filepath: str | Path) -> "MemoryRecordStore":
        """Load records from a JSON or YAML file."""
        path = Path(filepath)

        if not path.exists():
            raise FileNotFoundError(f"Record file not found: {path}")

        with open(path, encoding="utf-8") as f:
            try:
                if path.suffix.lower() == ".json":
                    data = json.load(f)
                else:
                    data = yaml.safe_load(f)
            except (ValueError, yaml.YAMLError) as e:
                raise StoreError(f"Unreadable record file: {path}: {e}") from e

        return cls.from_data(data)

    @classmethod
    def from_data(cls, data: Any) -> "MemoryRecordStore":
        """Create a store from a list of records or ``{"records": [...]}``."""
        if data is None:
            return cls()
        if isinstance(data, dict):
            data = data.get("records", [])
        if not isinstance(data, list):
            raise StoreError("Record data must be a list or contain a 'records' list")

        return cls(_parse_record(item) for item in data)

    def __len__(self) -> int:
        return len(self._records)

    def find_by_local_code(self, code: str) -> CodeRecord | None:
        matches = [r for r in self._records if r.local_code == code]
        if not matches:
            return None
        return min(matches, key=_confidence_rank)

    def find_by_any_code(self, code: str) -> list[CodeRecord]:
        return [
            r for r in self._records
            if r.local_code == code or r.target_code == code
        ]

    def find_by_category(self, category: str) -> list[CodeRecord]:
        wanted = category.lower()
        return [r for r in self._records if (r.category or "").lower() == wanted]

    def find_by_title_prefix(self, term: str) -> list[CodeRecord]:
        needle = term.lower()
        prefixed: list[CodeRecord] = []
        containing: list[CodeRecord] = []

        for record in self._records:
            title = (record.local_title or "").lower()
            if title.startswith(needle):
                prefixed.append(record)
            elif needle in title:
                containing.append(record)

        return prefixed + containing

    def free_text_search(self, escaped_literal: str) -> list[CodeRecord]:
        try:
            pattern = re.compile(escaped_literal, re.IGNORECASE)
        except re.error as e:
            raise StoreError(f"Invalid search pattern: {escaped_literal!r}") from e

        return [
            r for r in self._records
            if pattern.search(r.local_description or "")
            or pattern.search(r.target_definition or "")
        ]

    def find_by_target_code(self, code: str) -> CodeRecord | None:
        matches = [r for r in self._records if r.target_code == code]
        if not matches:
            return None
        return min(matches, key=_confidence_rank)

    def find_all(self) -> list[CodeRecord]:
        return sorted(
            self._records,
            key=lambda r: (r.local_title is None, r.local_title or ""),
        )
