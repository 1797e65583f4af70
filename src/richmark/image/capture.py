"""Image capture pipeline.

Images reach the editor three ways: dropped onto it, pasted into it, or
picked with the toolbar's file selector.  All three end up in
:meth:`ImageCapturePipeline.submit`, which:

1. keeps only image files;
2. captures the session's cursor position once for the whole batch;
3. starts one independent task per file that reads the bytes, validates
   them, hands an :class:`~richmark.models.UploadRequest` to the uploader
   and, on a ``{url}`` completion, splices ``![image](url)`` into the live
   document at the captured position.

Tasks are not ordered against each other: each completion is handled as
it arrives.  A failed file is logged and skipped; nothing is inserted for
it.  The captured position is a best-effort hint; if the document changed
while the upload was in flight the image may land somewhere else.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable

from richmark.config import EditorConfig
from richmark.editor.session import EditSession
from richmark.errors import (
    RichmarkImageError,
    RichmarkImageNotFoundError,
    RichmarkUploadError,
    RichmarkUploadRejectedError,
)
from richmark.image.state import UploadStateMachine
from richmark.image.uploader import Uploader
from richmark.image.validate import is_accepted_type, resolve_content_type, validate_image
from richmark.models import (
    CandidateFile,
    PendingUpload,
    UploadRequest,
    UploadState,
)
from richmark.observability import get_logger, resolve_metrics

log = get_logger("richmark.image")


class ImageCapturePipeline:
    """Upload dropped, pasted or selected images and insert their references.

    Parameters
    ----------
    session:
        The edit session whose document receives the images.
    uploader:
        Upload collaborator (see :class:`~richmark.image.uploader.Uploader`).
    config:
        Defaults to the session's configuration.
    """

    def __init__(
        self,
        session: EditSession,
        uploader: Uploader,
        config: EditorConfig | None = None,
    ) -> None:
        self._session = session
        self._uploader = uploader
        self._config = config or session.config
        self._metrics = resolve_metrics(self._config.metrics)
        self._semaphore = asyncio.Semaphore(self._config.image_max_concurrent)
        self._tasks: set[asyncio.Task[bool]] = set()
        self.pending: dict[str, PendingUpload] = {}

    @property
    def uploader(self) -> Uploader:
        return self._uploader

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def handle_drop(self, files: Iterable[CandidateFile]) -> bool:
        """Handle a drop.  Returns ``True`` if the default action should be prevented."""
        return bool(self.submit(files))

    def handle_paste(self, files: Iterable[CandidateFile]) -> bool:
        """Handle a paste.  Returns ``True`` if the default action should be prevented.

        Pastes without any image file (plain text, HTML) are left alone.
        """
        return bool(self.submit(files))

    def handle_selection(self, files: Iterable[CandidateFile]) -> list[asyncio.Task[bool]]:
        """Handle files picked with the toolbar image button."""
        return self.submit(files)

    def image_files(self, files: Iterable[CandidateFile]) -> list[CandidateFile]:
        """Keep the candidates whose content type is an accepted image type."""
        return [
            f for f in files
            if is_accepted_type(resolve_content_type(f), self._config)
        ]

    def submit(self, files: Iterable[CandidateFile]) -> list[asyncio.Task[bool]]:
        """Start one upload task per image file in *files*.

        Must be called from a running event loop.  Returns the started
        tasks; each resolves to ``True`` if its image was inserted.
        """
        images = self.image_files(files)
        if not images:
            return []

        position = self._session.cursor()
        loop = asyncio.get_running_loop()
        tasks: list[asyncio.Task[bool]] = []
        for candidate in images:
            pending = PendingUpload(
                filename=candidate.filename,
                content_type=resolve_content_type(candidate),
                position=position,
            )
            self.pending[pending.upload_id] = pending
            task = loop.create_task(self._process(candidate, pending))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
            tasks.append(task)

        self._metrics.gauge("richmark.uploads_in_flight", len(self.pending))
        log.debug(
            "images submitted",
            extra={"extra_fields": {"op": "submit", "count": len(tasks), "position": position}},
        )
        return tasks

    async def drain(self) -> None:
        """Wait until every in-flight upload has completed or failed.

        A task that died with an unexpected exception is logged and does
        not stop the wait for its siblings.
        """
        while self._tasks:
            results = await asyncio.gather(*list(self._tasks), return_exceptions=True)
            for result in results:
                if isinstance(result, BaseException):
                    log.error(
                        "upload task crashed",
                        exc_info=result,
                        extra={"extra_fields": {"op": "drain", "error": type(result).__name__}},
                    )

    # ------------------------------------------------------------------
    # Per-file flow
    # ------------------------------------------------------------------

    async def _process(self, candidate: CandidateFile, pending: PendingUpload) -> bool:
        machine = UploadStateMachine(pending.upload_id)
        try:
            try:
                machine.transition(UploadState.READING)
                data = await self._read(candidate)
                content_type = resolve_content_type(candidate, data)
                validate_image(candidate.filename, content_type, data, self._config)
                pending.content_type = content_type
                pending.size = len(data)

                machine.transition(UploadState.UPLOADING)
                request = UploadRequest(
                    filename=candidate.filename,
                    content_type=content_type,
                    size=len(data),
                    data=data,
                )
                async with self._semaphore:
                    result = await self._uploader.upload(request)
                if not result.ok:
                    raise RichmarkUploadRejectedError(
                        message=f"Upload of {candidate.filename} was rejected: {result.error}",
                        context={"filename": candidate.filename, "error": result.error},
                    )
                machine.transition(UploadState.UPLOADED)
            except (RichmarkImageError, RichmarkUploadError) as exc:
                machine.transition(UploadState.FAILED)
                self._metrics.increment(
                    "richmark.upload_failure_total",
                    tags={"reason": type(exc).__name__},
                )
                log.warning(
                    "image skipped",
                    extra={"extra_fields": {
                        "op": "upload",
                        "filename": candidate.filename,
                        "error": exc.message,
                    }},
                )
                return False

            machine.assert_can_insert()
            self._session.insert_image(pending.position, result.url)
            machine.transition(UploadState.INSERTED)
            self._metrics.increment("richmark.upload_success_total")
            log.info(
                "image inserted",
                extra={"extra_fields": {
                    "op": "upload",
                    "filename": candidate.filename,
                    "position": pending.position,
                }},
            )
            return True
        finally:
            self.pending.pop(pending.upload_id, None)
            self._metrics.gauge("richmark.uploads_in_flight", len(self.pending))

    async def _read(self, candidate: CandidateFile) -> bytes:
        """Read the candidate's bytes fully into memory."""
        if candidate.data is not None:
            return candidate.data
        if candidate.path is None:
            raise RichmarkImageNotFoundError(
                message=f"No data or path for {candidate.filename}",
                context={"filename": candidate.filename},
            )
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, candidate.path.read_bytes)
        except OSError as exc:
            raise RichmarkImageNotFoundError(
                message=f"Cannot read image file: {candidate.path}",
                context={"filename": candidate.filename, "path": str(candidate.path)},
                cause=exc,
            ) from exc
