"""Upload collaborators.

The image pipeline talks to whatever stores the image bytes through the
:class:`Uploader` protocol: one ``async upload(request)`` call per file,
answered by an :class:`~richmark.models.UploadResult` carrying either a
``url`` or an ``error``.  Calls are independent and may complete in any
order.

:class:`HttpUploader` is the stock implementation: it POSTs the request
as JSON (bytes base64-encoded) to ``EditorConfig.upload_url`` and expects
``{"url": ...}`` or ``{"error": ...}`` back.
"""

from __future__ import annotations

import time
from typing import Protocol, runtime_checkable

import httpx

from richmark.config import EditorConfig
from richmark.errors import RichmarkUploadTransportError
from richmark.models import UploadRequest, UploadResult
from richmark.observability import get_logger, resolve_metrics

log = get_logger("richmark.uploader")


@runtime_checkable
class Uploader(Protocol):
    """Anything that can store one image and report where it went."""

    async def upload(self, request: UploadRequest) -> UploadResult:
        """Store *request* and return its completion."""
        ...


class HttpUploader:
    """Upload images to an HTTP endpoint with ``httpx.AsyncClient``.

    Parameters
    ----------
    config:
        Editor configuration; ``upload_url`` must be set.
    client:
        Optional pre-built client (tests pass one with a mock transport).
        A client created here is closed by :meth:`close`.
    """

    def __init__(
        self,
        config: EditorConfig,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if not config.upload_url:
            raise ValueError("HttpUploader requires EditorConfig.upload_url")
        self._config = config
        self._metrics = resolve_metrics(config.metrics)
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            headers={"Accept": "application/json"},
            timeout=httpx.Timeout(config.upload_timeout_seconds),
        )

    async def upload(self, request: UploadRequest) -> UploadResult:
        """POST *request* and translate the response into an :class:`UploadResult`.

        Raises
        ------
        RichmarkUploadTransportError
            On timeouts and connection failures.
        """
        url = self._config.upload_url
        t0 = time.monotonic()
        try:
            response = await self._client.post(
                url,
                json=request.to_payload(),
                headers=self._config.upload_headers or None,
            )
        except httpx.HTTPError as exc:
            raise RichmarkUploadTransportError(
                message=f"Upload of {request.filename} failed: {exc}",
                context={"url": url, "filename": request.filename},
                cause=exc,
            ) from exc

        self._metrics.timing(
            "richmark.upload_duration_ms",
            (time.monotonic() - t0) * 1000,
            tags={"status": str(response.status_code)},
        )

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        if response.status_code >= 400:
            error = body.get("error") or f"HTTP {response.status_code}"
            log.warning(
                "upload rejected",
                extra={"extra_fields": {
                    "op": "upload",
                    "filename": request.filename,
                    "status_code": response.status_code,
                }},
            )
            return UploadResult(error=str(error))

        return UploadResult.from_payload(body)

    async def close(self) -> None:
        """Close the HTTP client if this uploader created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> HttpUploader:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()
