"""
Terminology Engine

Entry point for code resolution, symptom matching and disease grouping over a
configured record store.
"""

import logging
from pathlib import Path
import time
from typing import Any, Callable, Iterable, TypeVar

from tm2_terminology.engine.config import EngineConfig, load_config
from tm2_terminology.engine.hooks import LoggingHook, OperationEvent, OperationHook
from tm2_terminology.resolution.code_resolver import CodeResolver
from tm2_terminology.resolution.disease_grouping import DiseaseGrouper, GroupedResult
from tm2_terminology.resolution.lookup import TerminologyLookup
from tm2_terminology.resolution.symptom_matcher import SymptomMatcher, join_terms
from tm2_terminology.store.base import RecordStore
from tm2_terminology.store.http_store import HttpRecordStore, HttpStoreConfig
from tm2_terminology.store.memory_store import MemoryRecordStore
from tm2_terminology.store.record_types import CodeRecord

T = TypeVar("T")

logger = logging.getLogger(__name__)


def _list_outcome(records: list[CodeRecord]) -> tuple[str, int]:
    return ("ok" if records else "empty"), len(records)


def _record_outcome(record: CodeRecord | None) -> tuple[str, int]:
    return ("ok", 1) if record is not None else ("empty", 0)


def _grouped_outcome(result: GroupedResult) -> tuple[str, int]:
    return result.kind.value, result.group_count


class TerminologyEngine:
    """NAMASTE / ICD-11 TM2 terminology engine.

    Stateless between calls: each operation performs its store queries and
    returns a plain result. Safe to share across threads when the store is.

    The store and resolution components are built lazily without locking.
    Call ``prepare()`` on one thread before sharing the engine so they are
    built exactly once.
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        store: RecordStore | None = None,
        hooks: Iterable[OperationHook] | None = None,
    ):
        """Initialize engine with configuration and an optional store."""
        self.config = config or EngineConfig()

        self._store = store
        self._resolver: CodeResolver | None = None
        self._matcher: SymptomMatcher | None = None
        self._grouper: DiseaseGrouper | None = None
        self._lookup: TerminologyLookup | None = None

        if hooks is not None:
            self.hooks: list[OperationHook] = list(hooks)
        elif self.config.logging.log_operations:
            self.hooks = [LoggingHook()]
        else:
            self.hooks = []

    @classmethod
    def from_config(cls, config_path: str | Path) -> "TerminologyEngine":
        """Create engine from config file."""
        return cls(load_config(config_path))

    @classmethod
    def from_records(
        cls, records: Iterable[CodeRecord], config: EngineConfig | None = None
    ) -> "TerminologyEngine":
        """Create engine over an in-memory record list."""
        return cls(config, store=MemoryRecordStore(records))

    @property
    def store(self) -> RecordStore:
        """Get or create the record store."""
        if self._store is None:
            store_config = self.config.store
            if store_config.backend == "memory":
                if store_config.data_file:
                    self._store = MemoryRecordStore.from_file(store_config.data_file)
                else:
                    self._store = MemoryRecordStore()
            elif store_config.backend == "http":
                self._store = HttpRecordStore(
                    HttpStoreConfig(
                        base_url=store_config.base_url,
                        api_key=store_config.api_key,
                        timeout_seconds=store_config.timeout_seconds,
                    )
                )
            else:
                raise ValueError(
                    f"Unknown store backend: {store_config.backend}. Available: memory, http"
                )
        return self._store

    @property
    def resolver(self) -> CodeResolver:
        if self._resolver is None:
            self._resolver = CodeResolver(
                self.store,
                confidence_threshold=self.config.resolution.confidence_threshold,
                strict_input=self.config.resolution.strict_input,
            )
        return self._resolver

    @property
    def matcher(self) -> SymptomMatcher:
        if self._matcher is None:
            self._matcher = SymptomMatcher(
                self.store,
                min_query_length=self.config.resolution.min_query_length,
            )
        return self._matcher

    @property
    def grouper(self) -> DiseaseGrouper:
        if self._grouper is None:
            self._grouper = DiseaseGrouper(
                self.matcher,
                max_groups=self.config.resolution.max_disease_groups,
            )
        return self._grouper

    @property
    def lookup(self) -> TerminologyLookup:
        if self._lookup is None:
            self._lookup = TerminologyLookup(
                self.store,
                min_query_length=self.config.resolution.min_query_length,
                autocomplete_limit=self.config.resolution.autocomplete_limit,
            )
        return self._lookup

    def prepare(self) -> "TerminologyEngine":
        """Build the store and every resolution component now."""
        _ = self.resolver, self.matcher, self.grouper, self.lookup
        return self

    def add_hook(self, hook: OperationHook) -> None:
        """Register an operation hook."""
        self.hooks.append(hook)

    def _emit(self, event: OperationEvent) -> None:
        for hook in self.hooks:
            try:
                hook(event)
            except Exception:
                logger.exception("Operation hook failed for %s", event.operation)

    def _observe(
        self,
        operation: str,
        query: Any,
        call: Callable[[], T],
        describe: Callable[[T], tuple[str, int]],
    ) -> T:
        """Run ``call`` and report it to the hooks; errors are re-raised."""
        start = time.perf_counter()
        try:
            result = call()
        except Exception as e:
            self._emit(
                OperationEvent(
                    operation=operation,
                    query=str(query),
                    outcome="error",
                    duration_ms=(time.perf_counter() - start) * 1000,
                    error=f"{type(e).__name__}: {e}",
                )
            )
            raise

        outcome, count = describe(result)
        self._emit(
            OperationEvent(
                operation=operation,
                query=str(query),
                outcome=outcome,
                result_count=count,
                duration_ms=(time.perf_counter() - start) * 1000,
            )
        )
        return result

    # Core operations

    def resolve_by_code(self, code: str) -> list[CodeRecord]:
        """Resolve a NAMASTE or TM2 code to the best record per category."""
        return self._observe(
            "resolve_by_code", code, lambda: self.resolver.resolve(code), _list_outcome
        )

    def match_by_symptoms(self, query: str) -> list[CodeRecord]:
        """Records whose description or TM2 definition contains ``query``."""
        return self._observe(
            "match_by_symptoms", query, lambda: self.matcher.match(query), _list_outcome
        )

    def match_symptom_terms(self, terms: list[str]) -> list[CodeRecord]:
        """Symptom match for a list of terms joined into one query."""
        return self._observe(
            "match_by_symptoms",
            join_terms(terms),
            lambda: self.matcher.match_terms(terms),
            _list_outcome,
        )

    def group_symptom_matches(self, symptoms: list[str]) -> GroupedResult:
        """Symptom matches grouped into ranked TM2 disease groups."""
        return self._observe(
            "group_symptom_matches",
            join_terms(symptoms or []),
            lambda: self.grouper.group(symptoms),
            _grouped_outcome,
        )

    # Lookups

    def autocomplete(self, term: str, limit: int | None = None) -> list[CodeRecord]:
        return self._observe(
            "autocomplete", term, lambda: self.lookup.autocomplete(term, limit), _list_outcome
        )

    def get_by_local_code(self, code: str) -> CodeRecord | None:
        return self._observe(
            "get_by_local_code", code, lambda: self.lookup.get_by_local_code(code), _record_outcome
        )

    def get_by_category(self, category: str) -> list[CodeRecord]:
        return self._observe(
            "get_by_category", category, lambda: self.lookup.get_by_category(category), _list_outcome
        )

    def translate_to_target(self, code: str) -> str | None:
        return self._observe(
            "translate_to_target",
            code,
            lambda: self.lookup.translate_to_target(code),
            lambda target: ("ok", 1) if target else ("empty", 0),
        )

    def find_by_target_code(self, code: str) -> CodeRecord | None:
        return self._observe(
            "find_by_target_code", code, lambda: self.lookup.find_by_target_code(code), _record_outcome
        )

    def list_codes(self) -> list[CodeRecord]:
        return self._observe("list_codes", "", self.lookup.list_codes, _list_outcome)
