"""Host signal boundary.

The host page talks to an editor with named signals carrying small JSON
payloads.  Inbound signals are dispatched by :class:`HostBridge`:

- ``content_update {"content": str}``: :meth:`EditSession.content_update`
- ``clear_form``: :meth:`EditSession.clear`
- ``form_submit``: :meth:`EditSession.submit`
- ``validation_error {"errors": [str, ...]}``: :meth:`EditSession.validation_error`
- ``images_uploaded {"files": [{ref, filename, url | error}, ...]}``:
  completes uploads waiting in a :class:`BridgeUploader`

The one outbound signal besides the session's content push is
``upload_image``, emitted by :class:`BridgeUploader` for every image the
capture pipeline hands it.
"""

from __future__ import annotations

import asyncio
import uuid
from collections.abc import Callable
from typing import Any

from richmark.editor.session import EditSession
from richmark.errors import RichmarkUploadTransportError, RichmarkValidationError
from richmark.image.capture import ImageCapturePipeline
from richmark.models import UploadRequest, UploadResult
from richmark.observability import get_logger

log = get_logger("richmark.bridge")


class BridgeUploader:
    """Upload collaborator that round-trips through the host.

    Each :meth:`upload` emits ``upload_image`` with the request payload and
    a fresh ``ref``, then waits for :meth:`complete` to deliver the
    matching entry of an ``images_uploaded`` signal.

    Parameters
    ----------
    emit:
        ``emit(event, payload)``; sends an outbound signal to the host.
    """

    def __init__(self, emit: Callable[[str, dict[str, Any]], Any]) -> None:
        self._emit = emit
        self._waiting: dict[str, tuple[str, asyncio.Future[UploadResult]]] = {}

    @property
    def outstanding(self) -> int:
        """Number of uploads still waiting for the host."""
        return len(self._waiting)

    async def upload(self, request: UploadRequest) -> UploadResult:
        ref = uuid.uuid4().hex
        future: asyncio.Future[UploadResult] = asyncio.get_running_loop().create_future()
        self._waiting[ref] = (request.filename, future)
        try:
            try:
                self._emit("upload_image", {**request.to_payload(), "ref": ref})
            except Exception as exc:
                raise RichmarkUploadTransportError(
                    message=f"Upload of {request.filename} could not reach the host: {exc}",
                    context={"url": "upload_image", "filename": request.filename},
                    cause=exc,
                ) from exc
            return await future
        finally:
            self._waiting.pop(ref, None)

    def complete(self, files: list[dict[str, Any]]) -> int:
        """Resolve waiting uploads from an ``images_uploaded`` payload.

        Entries are matched by ``ref``; entries without a known ``ref``
        fall back to the oldest waiting upload with the same filename.

        Returns
        -------
        int
            How many waiting uploads were resolved.
        """
        resolved = 0
        for entry in files:
            future = self._match(entry)
            if future is None:
                log.warning(
                    "unmatched upload completion",
                    extra={"extra_fields": {
                        "op": "images_uploaded",
                        "filename": entry.get("filename"),
                        "ref": entry.get("ref"),
                    }},
                )
                continue
            future.set_result(UploadResult.from_payload(entry))
            resolved += 1
        return resolved

    def _match(self, entry: dict[str, Any]) -> asyncio.Future[UploadResult] | None:
        ref = entry.get("ref")
        if ref in self._waiting:
            future = self._waiting[ref][1]
            return None if future.done() else future
        filename = entry.get("filename")
        for name, future in self._waiting.values():
            if name == filename and not future.done():
                return future
        return None


class HostBridge:
    """Dispatch inbound host signals to an edit session.

    Parameters
    ----------
    session:
        The session the signals are addressed to.
    pipeline:
        Capture pipeline whose :class:`BridgeUploader` receives
        ``images_uploaded`` completions.
    """

    def __init__(
        self,
        session: EditSession,
        pipeline: ImageCapturePipeline | None = None,
    ) -> None:
        self.session = session
        self.pipeline = pipeline
        self._handlers: dict[str, Callable[[dict[str, Any]], Any]] = {
            "content_update": self._content_update,
            "clear_form": self._clear_form,
            "form_submit": self._form_submit,
            "validation_error": self._validation_error,
            "images_uploaded": self._images_uploaded,
        }

    def dispatch(self, event: str, payload: dict[str, Any] | None = None) -> Any:
        """Route *event* with *payload* to its handler and return the handler's result.

        Raises
        ------
        RichmarkValidationError
            If *event* is unknown or *payload* is malformed.
        """
        handler = self._handlers.get(event)
        if handler is None:
            raise RichmarkValidationError(
                message=f"Unknown host signal: {event}",
                context={"event": event, "payload": payload},
            )
        if payload is None:
            payload = {}
        if not isinstance(payload, dict):
            raise RichmarkValidationError(
                message=f"Payload of {event} must be an object",
                context={"event": event, "payload": payload},
            )
        log.debug("host signal", extra={"extra_fields": {"op": "dispatch", "event": event}})
        return handler(payload)

    def _content_update(self, payload: dict[str, Any]) -> bool:
        content = payload.get("content")
        if content is None:
            content = ""
        if not isinstance(content, str):
            raise RichmarkValidationError(
                message="content_update requires a string 'content'",
                context={"event": "content_update", "payload": payload},
            )
        return self.session.content_update(content)

    def _clear_form(self, payload: dict[str, Any]) -> None:
        self.session.clear()

    def _form_submit(self, payload: dict[str, Any]) -> str:
        return self.session.submit()

    def _validation_error(self, payload: dict[str, Any]) -> None:
        errors = payload.get("errors")
        if errors is not None and not isinstance(errors, list):
            raise RichmarkValidationError(
                message="validation_error requires a list of 'errors'",
                context={"event": "validation_error", "payload": payload},
            )
        self.session.validation_error(errors)

    def _images_uploaded(self, payload: dict[str, Any]) -> int:
        uploader = self.pipeline.uploader if self.pipeline is not None else None
        if not isinstance(uploader, BridgeUploader):
            raise RichmarkValidationError(
                message="images_uploaded received but no bridge uploader is attached",
                context={"event": "images_uploaded", "payload": payload},
            )
        files = payload.get("files")
        if not isinstance(files, list) or not all(isinstance(f, dict) for f in files):
            raise RichmarkValidationError(
                message="images_uploaded requires a list of 'files' objects",
                context={"event": "images_uploaded", "payload": payload},
            )
        return uploader.complete(files)
