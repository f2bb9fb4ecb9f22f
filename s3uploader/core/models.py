"""
Domain models for uploads.

These are plain values. A StorageTarget is configured once per Uploader and
never changes; an UploadResult is created per call and handed back to the
caller.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional


@dataclass(frozen=True)
class UploadRequest:
    """A payload and the caller-supplied label it is stored under."""
    payload: bytes
    identifier: str

    def __post_init__(self) -> None:
        if not isinstance(self.payload, (bytes, bytearray)):
            raise TypeError("payload must be bytes")
        if not isinstance(self.identifier, str):
            raise TypeError("identifier must be a string")


@dataclass(frozen=True)
class RetentionPolicy:
    """
    Compliance-mode retention applied to every uploaded object.

    A policy that is present but disabled still turns on bucket versioning
    when the bucket gets created; it only skips the per-object lock.
    """
    enabled: bool
    expires_at: datetime

    def __post_init__(self) -> None:
        if self.expires_at.tzinfo is None:
            raise ValueError("expires_at must be timezone-aware")

    @classmethod
    def from_days(cls, days: int, enabled: bool = True) -> "RetentionPolicy":
        """Build a policy that expires `days` days from now (UTC)."""
        if days < 1:
            raise ValueError("Retention must be at least one day")
        expires_at = datetime.now(timezone.utc) + timedelta(days=days)
        return cls(enabled=enabled, expires_at=expires_at)


@dataclass(frozen=True)
class CredentialSources:
    """
    Where boto3 should look for configuration and credentials.

    Each entry left as None falls back to boto3's default lookup
    (environment variables, ~/.aws/config, ~/.aws/credentials, instance
    metadata and so on).
    """
    config_file: Optional[str] = None
    shared_credentials_file: Optional[str] = None
    profile: Optional[str] = None


@dataclass(frozen=True)
class StorageTarget:
    """
    The bucket an Uploader writes to and how to reach it.

    region and endpoint_url are only needed for non-default regions and
    S3-compatible providers (MinIO, R2, ...).
    """
    bucket_name: str
    credentials: Optional[CredentialSources] = None
    retention: Optional[RetentionPolicy] = None
    region: Optional[str] = None
    endpoint_url: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.bucket_name or not self.bucket_name.strip():
            raise ValueError("bucket_name is required")

    @property
    def retention_enabled(self) -> bool:
        return self.retention is not None and self.retention.enabled


@dataclass(frozen=True)
class UploadResult:
    """Where a payload ended up."""
    key: str
    bucket: str
    retention_applied: bool = False

    @property
    def uri(self) -> str:
        return f"s3://{self.bucket}/{self.key}"
