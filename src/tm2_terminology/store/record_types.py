"""
Record Data Types

Canonical NAMASTE code records and their ICD-11 TM2 mapping metadata.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class Category(str, Enum):
    """Traditional medicine systems."""

    AYURVEDA = "ayurveda"
    SIDDHA = "siddha"
    UNANI = "unani"
    HOMEOPATHY = "homeopathy"
    YOGA = "yoga"
    NATUROPATHY = "naturopathy"

    @classmethod
    def values(cls) -> list[str]:
        return [c.value for c in cls]


# Wire key (camelCase, as served by the terminology service) -> field name
_WIRE_KEYS: dict[str, str] = {
    "id": "id",
    "code": "local_code",
    "codeTitle": "local_title",
    "codeDescription": "local_description",
    "type": "category",
    "tm2Code": "target_code",
    "tm2Title": "target_title",
    "tm2Definition": "target_definition",
    "tm2Uri": "target_uri",
    "confidenceScore": "confidence_score",
}


@dataclass(frozen=True)
class CodeRecord:
    """A traditional medicine code and its TM2 mapping."""

    id: str
    local_code: str
    local_title: str | None = None
    local_description: str | None = None
    category: str | None = None
    target_code: str | None = None  # absent for unmapped records
    target_title: str | None = None
    target_definition: str | None = None
    target_uri: str | None = None
    confidence_score: float | None = None

    @property
    def is_mapped(self) -> bool:
        """Whether the record carries a non-blank target code."""
        return bool(self.target_code and self.target_code.strip())

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CodeRecord":
        """Create a record from wire (camelCase) or field (snake_case) keys."""
        values: dict[str, Any] = {}
        for key, value in data.items():
            name = _WIRE_KEYS.get(key, key)
            if name in cls.__dataclass_fields__:
                values[name] = value

        if "local_code" not in values:
            raise ValueError(f"Record is missing a code: {data}")

        score = values.get("confidence_score")
        if score is not None:
            values["confidence_score"] = float(score)

        values["id"] = str(values.get("id") or values["local_code"])
        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the terminology service wire format."""
        return {
            wire_key: getattr(self, field_name)
            for wire_key, field_name in _WIRE_KEYS.items()
        }
