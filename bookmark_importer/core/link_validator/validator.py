"""
Concurrent Link Validation

Probes bookmark URLs for reachability with a fixed pool of async workers
draining a shared queue. A single cancellation event gates both dequeuing
and in-flight probes, and each probe runs under its own timeout so that a
timeout can be told apart from a user abort.
"""

import asyncio
import logging
import os
from typing import Any, Callable, Dict, Iterable, Optional

import httpx

from ...config.pydantic_config import OFFLINE_ENV_VAR
from ..data_models import ValidationProgress, ValidationStatus
from .helpers import classify_status_code, classify_url

logger = logging.getLogger(__name__)

CONCURRENCY = 5
TIMEOUT_SECONDS = 8.0

ProgressCallback = Callable[[ValidationProgress], None]


def env_connectivity() -> bool:
    """Report connectivity unless offline mode is forced through the env."""
    return os.getenv(OFFLINE_ENV_VAR, "").lower() not in ("1", "true", "yes")


def _item_url(item: Any) -> Any:
    if isinstance(item, dict):
        return item.get("url")
    return getattr(item, "url", None)


class LinkValidator:
    """
    Batch link validator with cancellation.

    Only one batch may run at a time per instance. ``abort()`` cancels the
    running batch: in-flight probes resolve as PENDING and queued links are
    left out of the result map.
    """

    DEFAULT_HEADERS = {
        "User-Agent": (
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
        ),
        "Accept": "*/*",
        "Cache-Control": "no-store",
        "Pragma": "no-cache",
    }

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        concurrency: int = CONCURRENCY,
        timeout: float = TIMEOUT_SECONDS,
        network_error_status: ValidationStatus = ValidationStatus.INVALID,
        is_online: Optional[Callable[[], bool]] = None,
    ):
        """
        Initialize the validator.

        Args:
            client: HTTP client to probe with; a private one is opened per
                batch when omitted
            concurrency: Number of worker tasks
            timeout: Per-probe timeout in seconds
            network_error_status: Status for transport failures such as DNS
                errors or refused connections
            is_online: Connectivity check consulted before and during a batch
        """
        self.client = client
        self.concurrency = max(1, concurrency)
        self.timeout = timeout
        self.network_error_status = ValidationStatus(network_error_status)
        self.is_online = is_online or env_connectivity

        self._validating = False
        self._cancel_event: Optional[asyncio.Event] = None

    @classmethod
    def from_config(cls, network_config, client: Optional[httpx.AsyncClient] = None):
        """Build a validator from a NetworkConfig."""
        offline = network_config.offline
        return cls(
            client=client,
            concurrency=network_config.concurrency,
            timeout=network_config.timeout,
            network_error_status=ValidationStatus(network_config.network_error_status),
            is_online=(lambda: False) if offline else None,
        )

    def is_validating(self) -> bool:
        return self._validating

    def abort(self) -> None:
        """Cancel the running batch. No-op when idle."""
        if self._cancel_event is not None and not self._cancel_event.is_set():
            logger.info("Link validation aborted")
            self._cancel_event.set()

    async def validate_batch(
        self,
        items: Iterable[Any],
        on_progress: Optional[ProgressCallback] = None,
    ) -> Dict[Any, ValidationStatus]:
        """
        Validate a batch of links.

        Args:
            items: Objects or dicts carrying a ``url``
            on_progress: Called once per completed link with running counters

        Returns:
            Mapping of URL to ValidationStatus for every link that resolved;
            non-string URLs are keyed by their ``str()``
        """
        items = list(items or [])
        total = len(items)

        if total == 0:
            self._notify(on_progress, ValidationProgress())
            return {}

        if not self.is_online():
            logger.warning("Offline, skipping link validation")
            self._notify(on_progress, ValidationProgress(current=total, total=total))
            return {}

        if self._validating:
            logger.warning("Link validation already running; abort it first")
            return {}

        self._validating = True
        self._cancel_event = cancel_event = asyncio.Event()

        queue: "asyncio.Queue[Any]" = asyncio.Queue()
        for item in items:
            queue.put_nowait(item)

        results: Dict[Any, ValidationStatus] = {}
        progress = ValidationProgress(total=total)

        logger.info(f"Validating {total} links with {self.concurrency} workers")

        async def worker(client: httpx.AsyncClient) -> None:
            while not cancel_event.is_set():
                try:
                    item = queue.get_nowait()
                except asyncio.QueueEmpty:
                    return

                url = _item_url(item)
                status = await self._validate_one(client, url, cancel_event)
                results[url if isinstance(url, str) else str(url)] = status

                progress.current += 1
                if status is ValidationStatus.VALID:
                    progress.valid += 1
                elif status is ValidationStatus.SUSPICIOUS:
                    progress.suspicious += 1
                elif status is ValidationStatus.INVALID:
                    progress.invalid += 1
                self._notify(on_progress, ValidationProgress(**progress.to_dict()))

        try:
            if self.client is not None:
                await self._run_workers(worker, self.client, total)
            else:
                async with self._create_client() as client:
                    await self._run_workers(worker, client, total)
        finally:
            self._validating = False
            self._cancel_event = None

        logger.info(
            f"Link validation finished: {progress.current}/{total} checked, "
            f"{progress.valid} valid, {progress.suspicious} suspicious, "
            f"{progress.invalid} invalid"
        )
        return results

    async def _run_workers(self, worker, client: httpx.AsyncClient, total: int) -> None:
        workers = [
            asyncio.ensure_future(worker(client))
            for _ in range(min(self.concurrency, total))
        ]
        try:
            await asyncio.gather(*workers)
        except BaseException:
            for task in workers:
                task.cancel()
            await asyncio.gather(*workers, return_exceptions=True)
            raise

    def _create_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            limits=httpx.Limits(max_connections=self.concurrency),
            follow_redirects=True,
        )

    async def _validate_one(
        self,
        client: httpx.AsyncClient,
        url: Any,
        cancel_event: asyncio.Event,
    ) -> ValidationStatus:
        if not url or not isinstance(url, str):
            return ValidationStatus.INVALID

        if cancel_event.is_set() or not self.is_online():
            return ValidationStatus.PENDING

        status = classify_url(url)
        if status is not None:
            return status

        return await self._probe(client, url.strip(), cancel_event)

    async def _probe(
        self,
        client: httpx.AsyncClient,
        url: str,
        cancel_event: asyncio.Event,
    ) -> ValidationStatus:
        """
        Issue a HEAD probe raced against the per-probe timeout and the
        batch cancellation event.
        """
        request = asyncio.ensure_future(
            client.head(url, headers=self.DEFAULT_HEADERS, follow_redirects=True)
        )
        cancelled = asyncio.ensure_future(cancel_event.wait())

        try:
            done, _ = await asyncio.wait(
                {request, cancelled},
                timeout=self.timeout,
                return_when=asyncio.FIRST_COMPLETED,
            )
        except asyncio.CancelledError:
            request.cancel()
            raise
        finally:
            cancelled.cancel()

        if request not in done:
            request.cancel()
            await asyncio.gather(request, return_exceptions=True)
            if cancel_event.is_set():
                return ValidationStatus.PENDING
            logger.debug(f"Probe timed out after {self.timeout}s: {url}")
            return ValidationStatus.SUSPICIOUS

        try:
            response = request.result()
        except httpx.TimeoutException:
            logger.debug(f"Probe timed out: {url}")
            return ValidationStatus.SUSPICIOUS
        except httpx.InvalidURL:
            return ValidationStatus.INVALID
        except httpx.HTTPError as e:
            logger.debug(f"Probe failed for {url}: {e}")
            return self.network_error_status
        except Exception as e:
            logger.debug(f"Unexpected probe error for {url}: {e}")
            return ValidationStatus.INVALID

        return classify_status_code(response.status_code)

    @staticmethod
    def _notify(on_progress: Optional[ProgressCallback], progress: ValidationProgress) -> None:
        if on_progress is None:
            return
        try:
            on_progress(progress)
        except Exception:
            logger.exception("Validation progress callback failed")
