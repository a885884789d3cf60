"""
FHIR Module

FHIR R4 rendering of terminology search results.
"""

from tm2_terminology.fhir.parameters import (
    FHIR_JSON_CONTENT_TYPE,
    ParametersConfig,
    ParametersFormatter,
    parse_symptoms,
)

__all__ = [
    "FHIR_JSON_CONTENT_TYPE",
    "ParametersConfig",
    "ParametersFormatter",
    "parse_symptoms",
]
