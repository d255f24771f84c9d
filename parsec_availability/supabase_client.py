from __future__ import annotations

import logging
from dataclasses import dataclass
from time import sleep
from typing import Any

import httpx

from availability_core.io.schemas import PROFILE_COLS

from .config import SupabaseConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReadOperation:
    method: str
    path: str
    default_params: tuple[tuple[str, str], ...] = ()


PROFILE_SELECT = ",".join(PROFILE_COLS)

READ_ONLY_OPERATIONS: dict[str, ReadOperation] = {
    "availability": ReadOperation(
        "GET",
        "/rest/v1/availability",
        (("select", "*"), ("order", "created_at.desc")),
    ),
    "profiles": ReadOperation(
        "GET",
        "/rest/v1/profiles",
        (("select", PROFILE_SELECT), ("order", "created_at.desc")),
    ),
}


class ReadOnlySupabaseClient:
    """Strict read-only client for the hosted Postgres REST API.

    Only the operation names listed in READ_ONLY_OPERATIONS are executable.
    Any unknown operation is rejected before any network request is sent.
    """

    def __init__(self, *, base_url: str, timeout_s: float = 30.0, retries: int = 3):
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self.retries = max(1, retries)

    def _headers(self, cfg: SupabaseConfig) -> dict[str, str]:
        return {
            "apikey": cfg.api_key,
            "Authorization": f"Bearer {cfg.api_key}",
            "Accept": "application/json",
        }

    def _request(
        self,
        *,
        operation: str,
        cfg: SupabaseConfig,
        params: dict[str, Any] | None = None,
    ) -> httpx.Response:
        op = READ_ONLY_OPERATIONS.get(operation)
        if op is None:
            raise ValueError(f"Operation '{operation}' is not allowed in read-only mode")

        url = f"{self.base_url}{op.path}"
        query = dict(op.default_params)
        if params:
            query.update(params)

        last_exc: Exception | None = None
        for attempt in range(self.retries):
            try:
                resp = httpx.request(
                    op.method,
                    url,
                    headers=self._headers(cfg),
                    params=query,
                    timeout=self.timeout_s,
                )
                if resp.status_code >= 500 and attempt < self.retries - 1:
                    logger.warning("%s returned %s, retrying", operation, resp.status_code)
                    sleep(2**attempt)
                    continue
                resp.raise_for_status()
                return resp
            except (httpx.TimeoutException, httpx.ConnectError) as exc:
                last_exc = exc
                if attempt < self.retries - 1:
                    logger.warning("%s failed (%s), retrying", operation, exc)
                    sleep(2**attempt)
                    continue
                raise
        if last_exc:
            raise last_exc
        raise RuntimeError("request failed without an explicit exception")

    def fetch_availability(self, cfg: SupabaseConfig) -> list[dict[str, Any]]:
        resp = self._request(operation="availability", cfg=cfg)
        data = resp.json()
        return data if isinstance(data, list) else []

    def fetch_profiles(self, cfg: SupabaseConfig) -> list[dict[str, Any]]:
        resp = self._request(operation="profiles", cfg=cfg)
        data = resp.json()
        return data if isinstance(data, list) else []

    def fetch_snapshot_payload(self, cfg: SupabaseConfig) -> dict[str, Any]:
        rows = self.fetch_availability(cfg)
        try:
            profiles = self.fetch_profiles(cfg)
        except httpx.HTTPStatusError:
            # Keys without profile access still see the legacy inline names.
            logger.exception("profiles fetch failed, continuing with inline owner fields")
            profiles = []
        return {"rows": rows, "profiles": profiles}
