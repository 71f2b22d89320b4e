"""
Utilities for the inference gateway
"""

from .uploads import UploadedFile, FileTooLargeError, stored_uploads, ensure_upload_dir
from .upstream_client import (
    UpstreamClient,
    ForwardRequest,
    ForwardResult,
    UpstreamError,
    UpstreamUnavailableError,
    UpstreamTimeoutError,
    UpstreamResponseError,
    UpstreamRequestError,
)

__all__ = [
    "UploadedFile",
    "FileTooLargeError",
    "stored_uploads",
    "ensure_upload_dir",
    "UpstreamClient",
    "ForwardRequest",
    "ForwardResult",
    "UpstreamError",
    "UpstreamUnavailableError",
    "UpstreamTimeoutError",
    "UpstreamResponseError",
    "UpstreamRequestError",
]
