"""
FHIR Parameters Formatter

Render code and symptom search results as FHIR R4 Parameters resources.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any
import json
import time

from tm2_terminology.resolution.disease_grouping import (
    DiseaseGroup,
    GroupedResult,
    GroupingOutcome,
)
from tm2_terminology.store.record_types import CodeRecord

NAMASTE_SYSTEM = "http://terminology.hl7.org.in/CodeSystem/namaste"
TM2_SYSTEM = "http://id.who.int/icd/release/11/tm2"
FHIR_JSON_CONTENT_TYPE = "application/fhir+json;fhirVersion=4.0"


@dataclass
class ParametersConfig:
    """Configuration for FHIR Parameters output."""

    local_system: str = NAMASTE_SYSTEM
    target_system: str = TM2_SYSTEM
    parameters_profile: str = "http://hl7.org.in/fhir/StructureDefinition/AyushParameters"
    outcome_profile: str = "http://hl7.org.in/fhir/StructureDefinition/AyushTerminology"
    tag_system: str = "http://terminology.hl7.org.in/CodeSystem/terminology-tags"


def _millis() -> int:
    return int(time.time() * 1000)


def _value(name: str, kind: str, value: Any) -> dict[str, Any] | None:
    """A parameter part with a typed value; ``None`` when the value is absent."""
    if value is None:
        return None
    return {"name": name, f"value{kind}": value}


def _group(name: str, *parts: dict[str, Any] | None) -> dict[str, Any]:
    """A parameter holding nested parts, skipping absent ones."""
    return {"name": name, "part": [p for p in parts if p is not None]}


def parse_symptoms(query: str | None) -> list[str]:
    """Split a comma-separated symptom query; otherwise one term."""
    if query is None or not query.strip():
        return []

    if "," in query:
        return [s.strip() for s in query.split(",") if s.strip()]

    return [query.strip()]


class ParametersFormatter:
    """Build FHIR Parameters for terminology search results."""

    def __init__(self, config: ParametersConfig | None = None):
        """Initialize formatter."""
        self.config = config or ParametersConfig()

    def code_search(self, code: str, records: list[CodeRecord]) -> dict[str, Any]:
        """Parameters for a code resolution result."""
        parameters = self._parameters(f"search-by-code-result-{code}")
        params = parameters["parameter"]

        if not records:
            params.append(_value("result", "Boolean", False))
            params.append(_value("message", "String", f"No code found matching: {code}"))
            return parameters

        params.append(_value("result", "Boolean", True))
        params.append(_value("totalMatches", "Integer", len(records)))

        for record in records:
            params.append(
                _group(
                    "match",
                    self._local_code(record),
                    _value("type", "String", record.category),
                    self._tm2_mapping(record),
                    _value("description", "String", record.local_description),
                    _value("confidenceScore", "Decimal", record.confidence_score),
                )
            )

        return parameters

    def symptom_search(self, result: GroupedResult) -> dict[str, Any]:
        """Parameters for a grouped symptom search."""
        kind = result.kind

        if kind == GroupingOutcome.NO_SYMPTOMS:
            parameters = self._parameters(f"search-by-symptoms-result-{_millis()}")
            parameters["parameter"] += [
                _value("result", "Boolean", False),
                _value("message", "String", "No symptoms provided"),
            ]
            return parameters

        if kind == GroupingOutcome.NO_MATCHES:
            parameters = self._parameters(f"search-by-symptoms-result-{_millis()}")
            parameters["parameter"] += [
                _value("result", "Boolean", False),
                _value("message", "String", f"No symptoms found matching: {result.matched_symptoms}"),
            ]
            return parameters

        if kind == GroupingOutcome.TOO_MANY_GROUPS:
            parameters = self._parameters(f"search-by-symptoms-error-{_millis()}")
            parameters["parameter"] += [
                _value("result", "Boolean", False),
                _value("error", "String", "Too many results"),
                _value(
                    "message",
                    "String",
                    f"Found {result.group_count} disease groups. Please refine your symptoms "
                    f"to get {result.max_groups} or fewer results.",
                ),
                _value("resultCount", "Integer", result.group_count),
                _value("maxAllowed", "Integer", result.max_groups),
            ]
            return parameters

        parameters = self._parameters(f"search-by-symptoms-grouped-results-{_millis()}")
        params = parameters["parameter"]
        params.append(_value("result", "Boolean", True))
        params.append(_value("totalDiseaseGroups", "Integer", result.group_count))
        params.append(_value("matchedSymptoms", "String", result.matched_symptoms))

        for group in result.groups:
            params.append(self._disease_group(group))

        return parameters

    def operation_outcome(self, message: str, details: str | None = None) -> dict[str, Any]:
        """Error OperationOutcome."""
        diagnostics = f"Error: {message}."
        if details:
            diagnostics += f" Details: {details}"

        return {
            "resourceType": "OperationOutcome",
            "id": f"error-{_millis()}",
            "meta": self._meta(self.config.outcome_profile, "terminology-service", "Terminology Service"),
            "issue": [
                {
                    "severity": "error",
                    "code": "processing",
                    "diagnostics": diagnostics,
                }
            ],
        }

    def to_json(self, resource: dict[str, Any], indent: int = 2) -> str:
        """Serialize resource to JSON string."""
        return json.dumps(resource, indent=indent)

    def _parameters(self, resource_id: str) -> dict[str, Any]:
        return {
            "resourceType": "Parameters",
            "id": resource_id,
            "meta": self._meta(self.config.parameters_profile, "terminology-operation", "Terminology Operation"),
            "parameter": [],
        }

    def _meta(self, profile: str, tag_code: str, tag_display: str) -> dict[str, Any]:
        return {
            "versionId": "1",
            "lastUpdated": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "profile": [profile],
            "security": [
                {
                    "system": "http://terminology.hl7.org/CodeSystem/v3-Confidentiality",
                    "code": "N",
                    "display": "Normal",
                }
            ],
            "tag": [
                {
                    "system": self.config.tag_system,
                    "code": tag_code,
                    "display": tag_display,
                }
            ],
        }

    def _local_code(self, record: CodeRecord) -> dict[str, Any]:
        return _group(
            "code",
            _value("system", "Uri", self.config.local_system),
            _value("code", "Code", record.local_code),
            _value("display", "String", record.local_title),
        )

    def _tm2_mapping(self, record: CodeRecord) -> dict[str, Any] | None:
        if not record.is_mapped:
            return None
        return _group(
            "tm2Mapping",
            _value("system", "Uri", self.config.target_system),
            _value("code", "Code", record.target_code),
            _value("display", "String", record.target_title),
            _value("definition", "String", record.target_definition),
            _value("link", "Uri", record.target_uri),
        )

    def _disease_group(self, group: DiseaseGroup) -> dict[str, Any]:
        tm2_disease = _group(
            "tm2Disease",
            _value("system", "Uri", self.config.target_system),
            _value("code", "Code", group.target_code),
            _value("display", "String", group.target_title),
            _value("definition", "String", group.target_definition),
        )

        mappings = [
            _group(
                "traditionalMedicineMapping",
                self._local_code(member),
                _value("type", "String", member.category),
                _value("description", "String", member.local_description),
                _value("mappingConfidenceScore", "Decimal", member.confidence_score),
            )
            for member in group.members
        ]

        return _group(
            "diseaseGroup",
            tm2_disease,
            _value("symptomSimilarityScore", "Decimal", group.similarity_score),
            _value("traditionalMedicineMappingCount", "Integer", group.mapping_count),
            *mappings,
        )
