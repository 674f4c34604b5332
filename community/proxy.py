"""Load community workflows from the remote content store.

The hosted service keeps workflows in object storage. Loading one is two
hops: ask the metadata API for a presigned download URL, then download the
workflow JSON from that URL directly. Both hops share one deadline and one
cancellation token, and nothing is retried.
"""

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any
from urllib.parse import quote

import httpx

from community.cancellation import CancellationToken
from config import settings

logger = logging.getLogger(__name__)

GENERIC_ERROR = "Failed to load workflow"


class FetchStatus(str, Enum):
    OK = "ok"
    NOT_FOUND = "not_found"
    RESOLUTION_FAILED = "resolution_failed"
    DOWNLOAD_FAILED = "download_failed"
    TIMEOUT = "timeout"
    CANCELLED = "cancelled"
    FAILED = "failed"


_STATUS_CODES = {
    FetchStatus.OK: 200,
    FetchStatus.NOT_FOUND: 404,
    FetchStatus.TIMEOUT: 504,
    FetchStatus.CANCELLED: 499,
}


@dataclass
class WorkflowFetchResult:
    """Outcome of one community workflow load. ``workflow`` is set only on success."""

    status: FetchStatus
    workflow: Any = None
    error: str | None = None
    upstream_status: int | None = None  # metadata API status, when it answered non-2xx

    @property
    def success(self) -> bool:
        return self.status is FetchStatus.OK

    @property
    def http_status(self) -> int:
        if self.status in _STATUS_CODES:
            return _STATUS_CODES[self.status]
        if self.status is FetchStatus.RESOLUTION_FAILED and self.upstream_status:
            return self.upstream_status
        return 500

    def to_dict(self) -> dict:
        if self.success:
            return {"success": True, "workflow": self.workflow}
        return {"success": False, "error": self.error}


class DownloadUrlCache:
    """In-memory id -> download URL map whose entries expire after ``ttl`` seconds.

    Expired entries are swept on every write, and at most ``max_entries`` are
    kept (oldest dropped first).
    """

    def __init__(
        self,
        ttl: float,
        clock: Callable[[], float] = time.monotonic,
        max_entries: int = 1024,
    ):
        self.ttl = ttl
        self.clock = clock
        self.max_entries = max_entries
        self._entries: dict[str, tuple[float, str]] = {}

    def get(self, key: str) -> str | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, url = entry
        if self.clock() >= expires_at:
            del self._entries[key]
            return None
        return url

    def set(self, key: str, url: str) -> None:
        now = self.clock()
        self._sweep(now)
        if self.ttl <= 0:
            return

        self._entries.pop(key, None)
        while len(self._entries) >= self.max_entries:
            del self._entries[next(iter(self._entries))]
        self._entries[key] = (now + self.ttl, url)

    def _sweep(self, now: float) -> None:
        expired = [k for k, (expires_at, _) in self._entries.items() if now >= expires_at]
        for key in expired:
            del self._entries[key]

    def discard(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class CommunityWorkflowProxy:
    """Resolve a community workflow id and download the workflow document.

    Usage:
        proxy = CommunityWorkflowProxy()
        result = await proxy.fetch("portrait-pipeline")
        if result.success:
            workflow = result.workflow
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        cache_ttl: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        cache: DownloadUrlCache | None = None,
    ):
        self.base_url = (base_url or settings.community_workflows_api_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.community_workflows_timeout
        self.transport = transport
        if cache is None:
            ttl = cache_ttl if cache_ttl is not None else settings.community_workflows_cache_ttl
            cache = DownloadUrlCache(ttl)
        self.cache = cache

    async def fetch(
        self,
        workflow_id: str,
        cancel_token: CancellationToken | None = None,
    ) -> WorkflowFetchResult:
        """Load one workflow. Never raises for upstream failures."""
        operation = asyncio.ensure_future(self._fetch(workflow_id))
        waiters: set[asyncio.Future] = {operation}
        cancel_waiter = None
        if cancel_token is not None:
            cancel_waiter = asyncio.ensure_future(cancel_token.wait())
            waiters.add(cancel_waiter)

        try:
            done, _ = await asyncio.wait(
                waiters, timeout=self.timeout, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            # Whatever ended the wait, nothing may keep running after we return
            for task in waiters:
                if not task.done():
                    task.cancel()
            await asyncio.gather(*waiters, return_exceptions=True)

        if operation in done:
            return operation.result()

        if cancel_waiter is not None and cancel_waiter in done:
            logger.info(
                "Community workflow fetch cancelled: %s (%s)",
                workflow_id,
                cancel_token.reason or "no reason given",
            )
            return WorkflowFetchResult(FetchStatus.CANCELLED, error="Request cancelled")

        logger.error("Community workflow fetch timed out after %.0fs: %s", self.timeout, workflow_id)
        return WorkflowFetchResult(FetchStatus.TIMEOUT, error="Request timed out")

    async def _fetch(self, workflow_id: str) -> WorkflowFetchResult:
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self.transport, follow_redirects=True
            ) as client:
                download_url = self.cache.get(workflow_id)
                if download_url is None:
                    resolved = await self._resolve(client, workflow_id)
                    if isinstance(resolved, WorkflowFetchResult):
                        return resolved
                    download_url = resolved
                    self.cache.set(workflow_id, download_url)
                else:
                    logger.debug("Using cached download URL for %s", workflow_id)

                return await self._download(client, workflow_id, download_url)

        except httpx.TimeoutException:
            logger.error("Community workflow fetch timed out: %s", workflow_id)
            return WorkflowFetchResult(FetchStatus.TIMEOUT, error="Request timed out")
        except httpx.HTTPError as e:
            logger.error("Error loading community workflow %s: %s", workflow_id, e)
            return WorkflowFetchResult(FetchStatus.FAILED, error=GENERIC_ERROR)
        except Exception:
            logger.exception("Unexpected error loading community workflow %s", workflow_id)
            return WorkflowFetchResult(FetchStatus.FAILED, error=GENERIC_ERROR)

    async def _resolve(
        self, client: httpx.AsyncClient, workflow_id: str
    ) -> str | WorkflowFetchResult:
        """Ask the metadata API for a presigned download URL."""
        response = await client.get(
            f"{self.base_url}/{quote(workflow_id, safe='')}",
            headers={"Accept": "application/json"},
        )

        if not response.is_success:
            if response.status_code == 404:
                return WorkflowFetchResult(
                    FetchStatus.NOT_FOUND, error=f"Workflow not found: {workflow_id}"
                )
            logger.error(
                "Error fetching community workflow URL: %d %s",
                response.status_code,
                response.reason_phrase,
            )
            return WorkflowFetchResult(
                FetchStatus.RESOLUTION_FAILED,
                error=GENERIC_ERROR,
                upstream_status=response.status_code,
            )

        try:
            data = response.json()
        except ValueError:
            data = None

        if not isinstance(data, dict) or data.get("success") is not True or not data.get("downloadUrl"):
            error = data.get("error") if isinstance(data, dict) else None
            logger.warning("Metadata API returned no download URL for %s: %s", workflow_id, error)
            return WorkflowFetchResult(
                FetchStatus.RESOLUTION_FAILED,
                error=str(error) if error else "Failed to get download URL",
            )

        return str(data["downloadUrl"])

    async def _download(
        self, client: httpx.AsyncClient, workflow_id: str, download_url: str
    ) -> WorkflowFetchResult:
        """Download the workflow document from its presigned URL."""
        # Presigned: no extra headers
        response = await client.get(download_url)

        if not response.is_success:
            self.cache.discard(workflow_id)
            logger.error(
                "Error fetching workflow from storage: %d %s",
                response.status_code,
                response.reason_phrase,
            )
            return WorkflowFetchResult(FetchStatus.DOWNLOAD_FAILED, error="Failed to download workflow")

        try:
            workflow = response.json()
        except ValueError as e:
            logger.error("Community workflow %s is not valid JSON: %s", workflow_id, e)
            return WorkflowFetchResult(FetchStatus.FAILED, error=GENERIC_ERROR)

        return WorkflowFetchResult(FetchStatus.OK, workflow=workflow)
