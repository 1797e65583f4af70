"""Upload lifecycle state machine.

Tracks one image file from acceptance to insertion and enforces valid
transitions, so a failed upload can never be inserted and an inserted one
can never be inserted twice.
"""

from __future__ import annotations

from richmark.models import UploadState


class UploadStateMachine:
    """Finite state machine for a single image upload.

    Valid transitions::

        PENDING    -> READING | FAILED
        READING    -> UPLOADING | FAILED
        UPLOADING  -> UPLOADED | FAILED
        UPLOADED   -> INSERTED | FAILED
        INSERTED   -> (terminal)
        FAILED     -> (terminal)

    Parameters
    ----------
    upload_id:
        Identifier of the upload being tracked.
    """

    VALID_TRANSITIONS: dict[UploadState, set[UploadState]] = {
        UploadState.PENDING: {UploadState.READING, UploadState.FAILED},
        UploadState.READING: {UploadState.UPLOADING, UploadState.FAILED},
        UploadState.UPLOADING: {UploadState.UPLOADED, UploadState.FAILED},
        UploadState.UPLOADED: {UploadState.INSERTED, UploadState.FAILED},
        UploadState.INSERTED: set(),
        UploadState.FAILED: set(),
    }

    def __init__(self, upload_id: str) -> None:
        self.upload_id: str = upload_id
        self.state: UploadState = UploadState.PENDING

    @property
    def is_terminal(self) -> bool:
        return not self.VALID_TRANSITIONS[self.state]

    def transition(self, new_state: UploadState) -> None:
        """Move to *new_state*.

        Raises
        ------
        ValueError
            If the transition from the current state is not valid.
        """
        allowed = self.VALID_TRANSITIONS.get(self.state, set())
        if new_state not in allowed:
            raise ValueError(
                f"Invalid state transition: {self.state.value} -> {new_state.value} "
                f"for upload {self.upload_id}. "
                f"Allowed transitions from {self.state.value}: "
                f"{{{', '.join(sorted(s.value for s in allowed))}}}"
            )
        self.state = new_state

    def assert_can_insert(self) -> None:
        """Raise ``ValueError`` unless the upload is in ``UPLOADED``."""
        if self.state != UploadState.UPLOADED:
            raise ValueError(
                f"Upload {self.upload_id} cannot be inserted in state "
                f"{self.state.value}; must be in {UploadState.UPLOADED.value}"
            )
