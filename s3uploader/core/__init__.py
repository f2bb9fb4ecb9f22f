"""
Core upload logic.

Contains the domain models, key generation and the Uploader. The Uploader
talks to S3 through whatever client it is given, so the whole flow can be
exercised against mocks.
"""

from .keys import generate_key
from .models import (
    CredentialSources,
    RetentionPolicy,
    StorageTarget,
    UploadRequest,
    UploadResult,
)
from .uploader import Uploader

__all__ = [
    "CredentialSources",
    "RetentionPolicy",
    "StorageTarget",
    "UploadRequest",
    "UploadResult",
    "Uploader",
    "generate_key",
]
