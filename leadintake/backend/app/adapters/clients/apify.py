# app/adapters/clients/apify.py
from __future__ import annotations

import logging
from typing import Any

import httpx

from ...config import settings

log = logging.getLogger(__name__)


class ApifyError(RuntimeError):
    pass


class ApifyClient:
    """
    Low-level HTTP client for the extraction platform.
    Returns raw dicts; canonicalization happens in services.normalize.

    `transport` exists so tests can plug an httpx.MockTransport.
    """

    def __init__(
        self,
        *,
        token: str | None = None,
        base_url: str | None = None,
        timeout_s: float | None = None,
        page_size: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._token = token if token is not None else settings.APIFY_TOKEN
        self._base_url = (base_url or settings.APIFY_BASE_URL).rstrip("/")
        self._timeout = httpx.Timeout(float(timeout_s or settings.APIFY_HTTP_TIMEOUT_S))
        self._page_size = int(page_size or settings.APIFY_DATASET_PAGE_SIZE)
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        if not self._token:
            raise ApifyError("APIFY_TOKEN is not set")
        return {"accept": "application/json", "Authorization": f"Bearer {self._token}"}

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            headers=self._headers(),
            timeout=self._timeout,
            transport=self._transport,
        )

    async def list_dataset_items(self, dataset_id: str) -> list[dict[str, Any]]:
        """
        Every item of a dataset, in order. Pages through offset/limit until a short page.
        """
        if not dataset_id:
            raise ApifyError("dataset id is required")

        items: list[Any] = []
        offset = 0
        async with self._client() as client:
            while True:
                params = {"format": "json", "clean": "true", "offset": offset, "limit": self._page_size}
                try:
                    r = await client.get(f"/datasets/{dataset_id}/items", params=params)
                    r.raise_for_status()
                    page = r.json()
                except httpx.HTTPStatusError as e:
                    raise ApifyError(
                        f"dataset {dataset_id}: HTTP {e.response.status_code}: {e.response.text[:300]}"
                    ) from e
                except httpx.HTTPError as e:
                    raise ApifyError(f"dataset {dataset_id}: {e!r}") from e

                if isinstance(page, dict):
                    page = page.get("items") or []
                if not isinstance(page, list):
                    raise ApifyError(f"dataset {dataset_id}: unexpected payload {type(page).__name__}")

                items.extend(page)
                if len(page) < self._page_size:
                    break
                offset += len(page)

        log.info("dataset downloaded dataset_id=%s count=%d", dataset_id, len(items))
        return items

    async def get_run(self, run_id: str) -> dict[str, Any]:
        async with self._client() as client:
            try:
                r = await client.get(f"/actor-runs/{run_id}")
                r.raise_for_status()
                body = r.json()
            except httpx.HTTPStatusError as e:
                raise ApifyError(f"run {run_id}: HTTP {e.response.status_code}: {e.response.text[:300]}") from e
            except httpx.HTTPError as e:
                raise ApifyError(f"run {run_id}: {e!r}") from e

        data = body.get("data") if isinstance(body, dict) else None
        if not isinstance(data, dict):
            raise ApifyError(f"run {run_id}: unexpected payload")
        return data


def run_exit_reason(run: dict[str, Any]) -> str:
    """Human readable reason for a failed run."""
    msg = run.get("statusMessage")
    if msg:
        return str(msg)
    code = run.get("exitCode")
    if code is not None and code != "":
        return f"exit code {code}"
    return "Unknown error"
