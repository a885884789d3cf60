"""
Terminology Errors

Error taxonomy shared by the record stores and the resolution engine.

"No match" is never an error: lookups return an empty list, ``None`` or an
explicit grouping outcome instead.
"""


class TerminologyError(Exception):
    """Base class for terminology engine errors."""


class InvalidInputError(TerminologyError, ValueError):
    """Caller passed a degenerate query where emptiness is not meaningful."""


class StoreError(TerminologyError, RuntimeError):
    """The record store failed or timed out."""
