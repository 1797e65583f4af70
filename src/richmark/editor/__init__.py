"""Live editor document and the edit session controller."""

from richmark.editor.document import LiveDocument
from richmark.editor.session import EditSession

__all__ = ["EditSession", "LiveDocument"]
