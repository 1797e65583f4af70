"""Image capture: validation, upload lifecycle and upload collaborators."""

from richmark.image.capture import ImageCapturePipeline
from richmark.image.state import UploadStateMachine
from richmark.image.uploader import HttpUploader, Uploader
from richmark.image.validate import (
    is_accepted_type,
    resolve_content_type,
    sniff_mime,
    validate_image,
)

__all__ = [
    "HttpUploader",
    "ImageCapturePipeline",
    "UploadStateMachine",
    "Uploader",
    "is_accepted_type",
    "resolve_content_type",
    "sniff_mime",
    "validate_image",
]
