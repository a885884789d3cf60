"""
TM2 Terminology FastAPI Server

REST API for NAMASTE to ICD-11 TM2 terminology resolution.

Usage:
    pip install -e ".[server]"
    uvicorn server:app --reload --port 8082

Endpoints:
    GET  /api/terminology/search/code/{code}   - Resolve a code
    GET  /api/terminology/search/symptoms      - Symptom text search
    GET  /api/terminology/autocomplete         - Title suggestions
    GET  /api/terminology/category/{category}  - Codes by system
    GET  /api/fhir/search/code/{code}          - Code search as FHIR Parameters
    GET  /api/fhir/search/symptoms             - Grouped symptom search (comma-separated)
    POST /api/fhir/search/symptoms             - Grouped symptom search (JSON array)

Copyright (c) 2024 Cleansheet LLC
License: CC BY 4.0
"""

import logging
import os
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import Depends, FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from tm2_terminology import TerminologyEngine, __version__
from tm2_terminology.engine.config import EngineConfig, StoreConfig, load_config
from tm2_terminology.errors import TerminologyError
from tm2_terminology.fhir.parameters import (
    FHIR_JSON_CONTENT_TYPE,
    ParametersFormatter,
    parse_symptoms,
)

logger = logging.getLogger(__name__)

# =============================================================================
# App Configuration
# =============================================================================

app = FastAPI(
    title="TM2 Terminology API",
    description="Traditional medicine (NAMASTE) to ICD-11 TM2 code mapping service",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# =============================================================================
# Engine Initialization
# =============================================================================

_engine: Optional[TerminologyEngine] = None
formatter = ParametersFormatter()


def get_engine() -> TerminologyEngine:
    """Get or create the engine from TM2_CONFIG or store environment variables.

    TM2_LOG_LEVEL overrides the config file's logging level.
    """
    global _engine

    if _engine is None:
        config_path = os.getenv("TM2_CONFIG")
        if config_path:
            config = load_config(config_path)
        else:
            config = EngineConfig()
            config.store = StoreConfig.from_env()

        logging.basicConfig(level=os.getenv("TM2_LOG_LEVEL") or config.logging.level)
        if config_path:
            logger.info("Loaded engine config from %s", config_path)

        _engine = TerminologyEngine(config).prepare()

    return _engine


# =============================================================================
# Request/Response Models
# =============================================================================

class TerminologyResponse(BaseModel):
    """Envelope for plain terminology responses."""
    success: bool
    message: Optional[str] = None
    errorCode: Optional[str] = None
    data: Optional[Any] = None

    @classmethod
    def ok(cls, data: Any) -> "TerminologyResponse":
        return cls(success=True, data=data)

    @classmethod
    def error(cls, message: str, error_code: str) -> "TerminologyResponse":
        return cls(success=False, message=message, errorCode=error_code)


class SymptomsRequest(BaseModel):
    """Request body for grouped symptom search."""
    symptoms: list[str] = []


def _records(records: list) -> list[dict[str, Any]]:
    return [r.to_dict() for r in records]


def _fhir_response(resource: dict[str, Any], status_code: int = 200) -> JSONResponse:
    return JSONResponse(
        content=resource,
        status_code=status_code,
        media_type=FHIR_JSON_CONTENT_TYPE,
        headers={"X-FHIR-Version": "4.0.1"},
    )


def _fhir_error(message: str, details: str) -> JSONResponse:
    return _fhir_response(formatter.operation_outcome(message, details), status_code=400)


# =============================================================================
# Terminology Endpoints
# =============================================================================

@app.get(
    "/api/terminology/search/code/{code_value}",
    response_model=TerminologyResponse,
    response_model_exclude_none=True,
)
def search_by_code(code_value: str, engine: TerminologyEngine = Depends(get_engine)):
    """Resolve a NAMASTE or TM2 code to the best record per category."""
    try:
        results = engine.resolve_by_code(code_value)
    except TerminologyError:
        logger.exception("Error in code search")
        return TerminologyResponse.error("Code search failed", "SEARCH_ERROR")

    if not results:
        return TerminologyResponse.error(f"Code not found: {code_value}", "NOT_FOUND")
    return TerminologyResponse.ok(_records(results))


@app.get(
    "/api/terminology/search/symptoms",
    response_model=TerminologyResponse,
    response_model_exclude_none=True,
)
def search_by_symptoms(query: str, engine: TerminologyEngine = Depends(get_engine)):
    """Search codes by symptom or description text."""
    try:
        results = engine.match_by_symptoms(query)
    except TerminologyError:
        logger.exception("Error in symptom search")
        return TerminologyResponse.error("Symptom search failed", "SEARCH_ERROR")

    return TerminologyResponse.ok(_records(results))


@app.get(
    "/api/terminology/autocomplete",
    response_model=TerminologyResponse,
    response_model_exclude_none=True,
)
def autocomplete(
    query: str,
    limit: int = Query(10),
    engine: TerminologyEngine = Depends(get_engine),
):
    """Title suggestions for search boxes."""
    try:
        results = engine.autocomplete(query, limit)
    except TerminologyError:
        logger.exception("Error in auto-complete search")
        return TerminologyResponse.error("Auto-complete search failed", "SEARCH_ERROR")

    return TerminologyResponse.ok(_records(results))


@app.get(
    "/api/terminology/category/{category}",
    response_model=TerminologyResponse,
    response_model_exclude_none=True,
)
def get_by_category(category: str, engine: TerminologyEngine = Depends(get_engine)):
    """Codes for a traditional medicine system."""
    try:
        results = engine.get_by_category(category)
    except TerminologyError:
        logger.exception("Error in category search")
        return TerminologyResponse.error("Category search failed", "SEARCH_ERROR")

    return TerminologyResponse.ok(_records(results))


@app.get("/api/terminology/health")
def terminology_health():
    """Health check endpoint."""
    return {
        "status": "UP",
        "service": "TM2 Terminology Service",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


# =============================================================================
# FHIR Endpoints
# =============================================================================

@app.get("/api/fhir/search/code/{code_value}")
def fhir_search_by_code(code_value: str, engine: TerminologyEngine = Depends(get_engine)):
    """Code search as FHIR Parameters."""
    try:
        records = engine.resolve_by_code(code_value)
    except TerminologyError as e:
        logger.exception("Error in FHIR code search")
        return _fhir_error("Code search failed", str(e))

    return _fhir_response(formatter.code_search(code_value, records))


@app.get("/api/fhir/search/symptoms")
def fhir_search_by_symptoms(query: str, engine: TerminologyEngine = Depends(get_engine)):
    """Grouped symptom search; ``query`` is comma-separated symptoms."""
    try:
        result = engine.group_symptom_matches(parse_symptoms(query))
    except TerminologyError as e:
        logger.exception("Error in FHIR symptom search")
        return _fhir_error("Symptom search failed", str(e))

    return _fhir_response(formatter.symptom_search(result))


@app.post("/api/fhir/search/symptoms")
def fhir_search_by_symptoms_post(
    request: SymptomsRequest, engine: TerminologyEngine = Depends(get_engine)
):
    """Grouped symptom search from a JSON array of symptoms."""
    if not request.symptoms:
        return _fhir_error("Invalid request", "symptoms array is required")

    try:
        result = engine.group_symptom_matches(request.symptoms)
    except TerminologyError as e:
        logger.exception("Error in FHIR symptom POST search")
        return _fhir_error("Symptom search failed", str(e))

    return _fhir_response(formatter.symptom_search(result))


@app.get("/api/fhir/health")
def fhir_health():
    """FHIR service health check."""
    return {
        "status": "UP",
        "service": "fhir-service",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8082")))
