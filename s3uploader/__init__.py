"""
s3uploader - upload byte payloads to S3 with optional retention locks.

This package contains:
- core: Domain models, key generation and the Uploader
- infrastructure: boto3 client construction
- config: Environment-driven settings
- cli: Command-line entry point
"""

from .core.models import (
    CredentialSources,
    RetentionPolicy,
    StorageTarget,
    UploadRequest,
    UploadResult,
)
from .core.uploader import Uploader
from .errors import ConfigurationError, KeyGenerationError, UploaderError

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "CredentialSources",
    "KeyGenerationError",
    "RetentionPolicy",
    "StorageTarget",
    "UploadRequest",
    "UploadResult",
    "Uploader",
    "UploaderError",
]
