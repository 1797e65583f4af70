"""Edit session controller.

:class:`EditSession` owns the live document of one editable field and
keeps it in step with the canonical Markdown buffer held by the host.

State machine::

    IDLE        --user edit-------------->  DEBOUNCING
    DEBOUNCING  --user edit-------------->  DEBOUNCING  (timer restarted)
    DEBOUNCING  --timer expires---------->  IDLE        (serialize, push to sink)
    any         --content_update--------->  SYNCING --> IDLE
                                            (or back to the previous state
                                            when the update is an echo)
    any         --clear------------------>  IDLE        (no push)
    any         --submit----------------->  IDLE        (serialize, push now)

The debounce timer is an :class:`asyncio.TimerHandle`; every edit cancels
the pending handle and schedules a new one, so a session must be driven
from a running event loop once edits start.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

from richmark.config import EditorConfig
from richmark.converter.html_to_md import MarkdownSerializer
from richmark.converter.inline import escape_html
from richmark.converter.md_to_html import MarkdownRenderer
from richmark.editor.document import LiveDocument
from richmark.models import SessionState
from richmark.observability import get_logger, resolve_metrics

log = get_logger("richmark.session")


class EditSession:
    """Debounced bridge between a live editor document and a Markdown buffer.

    Parameters
    ----------
    sink:
        Called with the serialized Markdown whenever the session pushes
        content (debounce expiry, :meth:`submit`).
    config:
        Editor configuration.
    initial_content:
        Markdown the editor is mounted with.
    loop:
        Event loop for the debounce timer.  Defaults to the running loop at
        the time of the first edit.
    """

    VALID_TRANSITIONS: dict[SessionState, set[SessionState]] = {
        SessionState.IDLE: {SessionState.DEBOUNCING, SessionState.SYNCING},
        SessionState.DEBOUNCING: {SessionState.IDLE, SessionState.SYNCING},
        SessionState.SYNCING: {SessionState.IDLE, SessionState.DEBOUNCING},
    }

    def __init__(
        self,
        sink: Callable[[str], Any],
        config: EditorConfig | None = None,
        *,
        initial_content: str = "",
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self._config = config or EditorConfig()
        self._sink = sink
        self._loop = loop
        self._renderer = MarkdownRenderer(self._config)
        self._serializer = MarkdownSerializer(self._config)
        self._metrics = resolve_metrics(self._config.metrics)
        self._timer: asyncio.TimerHandle | None = None
        self._state = SessionState.IDLE
        self._last_serialized = ""

        self.document = LiveDocument()
        self.selection: int | None = None
        self.errors: list[str] = []

        self.mount(initial_content)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def last_serialized(self) -> str:
        """The Markdown most recently produced by this session."""
        return self._last_serialized

    @property
    def config(self) -> EditorConfig:
        return self._config

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def mount(self, content: str) -> None:
        """Load *content* into the editor without pushing it back."""
        if content and content.strip():
            self.document.load(self._renderer.render(content))
        else:
            self.document.clear()
        self._last_serialized = self._serializer.serialize(self.document)

    def close(self) -> None:
        """Cancel any pending serialization; the editor is going away."""
        self._cancel_timer()
        self._state = SessionState.IDLE

    # ------------------------------------------------------------------
    # User edits
    # ------------------------------------------------------------------

    def text_change(self) -> None:
        """Record a user edit and (re)start the debounce timer."""
        self._cancel_timer()
        loop = self._loop or asyncio.get_running_loop()
        self._timer = loop.call_later(self._config.debounce_seconds, self._flush)
        self._transition(SessionState.DEBOUNCING)

    def edit(self, html: str) -> None:
        """Replace the live content with the widget's new *html* as a user edit."""
        self.document.load(html)
        self.text_change()

    def insert_image(self, position: int, reference: str) -> int:
        """Splice ``![alt](reference)`` plus a newline in at *position*.

        The insertion counts as a user edit: the cursor moves past the new
        text and a debounced serialization is scheduled.

        Returns
        -------
        int
            The new cursor offset.
        """
        markdown = f"![{self._config.image_alt}]({reference})\n"
        self.selection = self.document.insert_text(position, markdown)
        log.debug(
            "image reference inserted",
            extra={"extra_fields": {
                "op": "insert_image",
                "position": position,
                "cursor": self.selection,
            }},
        )
        self.text_change()
        return self.selection

    def cursor(self) -> int:
        """Current insertion point: the selection, or the end of the document."""
        if self.selection is not None:
            return self.selection
        return max(0, self.document.length - 1)

    # ------------------------------------------------------------------
    # Host signals
    # ------------------------------------------------------------------

    def content_update(self, content: str) -> bool:
        """Apply Markdown pushed by the host.

        An update equal to the last value this session serialized is an
        echo of its own push and is ignored.

        Returns
        -------
        bool
            ``True`` if the live document was replaced.
        """
        content = content or ""
        previous = self._state
        self._transition(SessionState.SYNCING)

        if content == self._last_serialized:
            self._metrics.increment(
                "richmark.external_update_total", tags={"applied": "false"}
            )
            self._transition(previous)
            return False

        self._cancel_timer()
        self.document.load(self._renderer.render(content))
        self._last_serialized = self._serializer.serialize(self.document)
        self._metrics.increment(
            "richmark.external_update_total", tags={"applied": "true"}
        )
        log.debug(
            "external content applied",
            extra={"extra_fields": {"op": "content_update", "chars": len(content)}},
        )
        self._transition(SessionState.IDLE)
        return True

    def clear(self) -> None:
        """Reset the editor to its empty placeholder without pushing."""
        self._cancel_timer()
        self.document.clear()
        self.selection = None
        self._last_serialized = ""
        self._transition(SessionState.IDLE)

    def submit(self) -> str:
        """Serialize and push immediately, bypassing the debounce delay."""
        self._cancel_timer()
        markdown = self._emit()
        self._transition(SessionState.IDLE)
        return markdown

    def validation_error(self, errors: list[str] | None) -> None:
        """Store the host's validation messages for display."""
        self.errors = [str(e) for e in errors or []]
        if self.errors:
            log.info(
                "validation errors received",
                extra={"extra_fields": {"op": "validation_error", "count": len(self.errors)}},
            )

    def error_html(self) -> str:
        """Validation messages as inline HTML, or ``""`` when there are none."""
        return "<br>".join(
            f'<span class="text-red-500 text-sm">{escape_html(error)}</span>'
            for error in self.errors
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _flush(self) -> None:
        self._timer = None
        self._emit()
        self._transition(SessionState.IDLE)

    def _emit(self) -> str:
        markdown = self._serializer.serialize(self.document)
        self._last_serialized = markdown
        log.debug(
            "content pushed",
            extra={"extra_fields": {"op": "push", "chars": len(markdown)}},
        )
        self._sink(markdown)
        return markdown

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _transition(self, new_state: SessionState) -> None:
        if new_state == self._state:
            return
        allowed = self.VALID_TRANSITIONS[self._state]
        if new_state not in allowed:
            raise ValueError(
                f"Invalid session transition: {self._state.value} -> {new_state.value}"
            )
        self._state = new_state
