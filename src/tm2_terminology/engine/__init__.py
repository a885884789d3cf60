"""
Engine Module

Configured entry point for the terminology operations.
"""

from tm2_terminology.engine.engine import TerminologyEngine
from tm2_terminology.engine.config import EngineConfig, load_config
from tm2_terminology.engine.hooks import LoggingHook, OperationEvent

__all__ = [
    "TerminologyEngine",
    "EngineConfig",
    "load_config",
    "LoggingHook",
    "OperationEvent",
]
