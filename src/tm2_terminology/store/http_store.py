"""
HTTP Record Store

Client for a remote terminology record service.

Every call carries an explicit timeout. Transport failures, timeouts,
unexpected status codes and undecodable bodies all surface as ``StoreError``;
nothing is retried here.
"""

from dataclasses import dataclass
import os
from typing import Any
from urllib.parse import quote

import requests
from requests.exceptions import RequestException

from tm2_terminology.errors import StoreError
from tm2_terminology.store.record_types import CodeRecord


@dataclass
class HttpStoreConfig:
    """Configuration for the HTTP record store."""

    base_url: str = "http://localhost:8081"
    api_key: str | None = None
    timeout_seconds: float = 30.0
    health_timeout_seconds: float = 5.0

    @classmethod
    def from_env(cls) -> "HttpStoreConfig":
        """Create configuration from environment variables."""
        return cls(
            base_url=os.environ.get("TM2_STORE_URL", "http://localhost:8081"),
            api_key=os.environ.get("TM2_STORE_TOKEN"),
            timeout_seconds=float(os.environ.get("TM2_STORE_TIMEOUT", "30.0")),
        )


class HttpRecordStore:
    """Record store backed by the terminology service's internal API."""

    def __init__(self, config: HttpStoreConfig | None = None):
        """Initialize HTTP record store."""
        self.config = config or HttpStoreConfig()

    @property
    def _headers(self) -> dict[str, str]:
        """Request headers."""
        headers = {"Accept": "application/json"}
        if self.config.api_key:
            headers["Authorization"] = f"Bearer {self.config.api_key}"
        return headers

    @property
    def _records_url(self) -> str:
        return f"{self.config.base_url.rstrip('/')}/internal/records"

    def _get(self, path: str, params: dict[str, str] | None = None,
             allow_missing: bool = False) -> Any:
        """GET a JSON document; ``None`` for a permitted 404."""
        url = f"{self._records_url}{path}"

        try:
            response = requests.get(
                url,
                headers=self._headers,
                params=params,
                timeout=self.config.timeout_seconds,
            )
        except RequestException as e:
            raise StoreError(f"Record store request failed: {url}: {e}") from e

        if response.status_code == 404 and allow_missing:
            return None

        if response.status_code != 200:
            raise StoreError(
                f"Record store error: {response.status_code} - {response.text[:500]}"
            )

        try:
            return response.json()
        except ValueError as e:
            raise StoreError(f"Record store returned invalid JSON: {url}") from e

    def _get_record(self, path: str) -> CodeRecord | None:
        data = self._get(path, allow_missing=True)
        if not data:
            return None
        return self._parse_record(data)

    def _get_records(self, path: str, params: dict[str, str] | None = None) -> list[CodeRecord]:
        data = self._get(path, params)
        if data is None:
            return []
        if not isinstance(data, list):
            raise StoreError(f"Record store returned {type(data).__name__}, expected a list")
        return [self._parse_record(item) for item in data]

    def _parse_record(self, data: Any) -> CodeRecord:
        try:
            return CodeRecord.from_dict(data)
        except (TypeError, ValueError, AttributeError) as e:
            raise StoreError(f"Malformed record from store: {data!r}") from e

    def find_by_local_code(self, code: str) -> CodeRecord | None:
        return self._get_record(f"/code/{quote(code, safe='')}")

    def find_by_any_code(self, code: str) -> list[CodeRecord]:
        return self._get_records(f"/any-code/{quote(code, safe='')}")

    def find_by_category(self, category: str) -> list[CodeRecord]:
        return self._get_records(f"/category/{quote(category, safe='')}")

    def find_by_title_prefix(self, term: str) -> list[CodeRecord]:
        return self._get_records("/title", {"term": term})

    def free_text_search(self, escaped_literal: str) -> list[CodeRecord]:
        return self._get_records("/search", {"text": escaped_literal})

    def find_by_target_code(self, code: str) -> CodeRecord | None:
        return self._get_record(f"/target/{quote(code, safe='')}")

    def find_all(self) -> list[CodeRecord]:
        return self._get_records("/")

    def health_check(self) -> bool:
        """Check that the record service is reachable."""
        try:
            response = requests.get(
                f"{self._records_url}/health",
                headers=self._headers,
                timeout=self.config.health_timeout_seconds,
            )
        except RequestException:
            return False
        return response.status_code == 200
