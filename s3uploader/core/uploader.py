"""
The Uploader: store a payload in a bucket, creating the bucket on demand.

One upload is a straight line of provider calls:

    HeadBucket -> (CreateBucket, PutBucketVersioning) -> PutObject
        -> PutObjectRetention

Each call is made exactly once. A failure anywhere before PutObject
completes aborts the upload and the provider's exception reaches the
caller unchanged. The retention lock is best-effort: the object is already
stored by then, so a failed lock is logged and the upload still succeeds.
"""

import logging
from typing import Callable, Optional

from botocore.exceptions import BotoCoreError, ClientError

from ..infrastructure.storage.client import create_s3_client
from .keys import generate_key
from .models import StorageTarget, UploadRequest, UploadResult

logger = logging.getLogger(__name__)

# HeadBucket has no response body, so a missing bucket usually shows up as
# a bare "404"; some S3-compatible providers send the named codes instead.
BUCKET_NOT_FOUND_CODES = ("404", "NoSuchBucket", "NotFound")

# S3 rejects an explicit LocationConstraint for its default region
DEFAULT_REGION = "us-east-1"


def _error_code(error: ClientError) -> str:
    return (error.response.get("Error") or {}).get("Code", "")


class Uploader:
    """
    Uploads payloads to the bucket described by a StorageTarget.

    The S3 client is built lazily from the target on first use unless one
    is passed in. Tests pass a mock or a stubbed boto3 client.

    Not safe to share between threads until the client has been built.
    """

    def __init__(
        self,
        target: StorageTarget,
        client=None,
        client_factory: Callable[[StorageTarget], object] = create_s3_client,
        log: Optional[logging.Logger] = None,
    ) -> None:
        self._target = target
        self._client = client
        self._client_factory = client_factory
        self._log = log or logger

    @property
    def target(self) -> StorageTarget:
        return self._target

    @property
    def client(self):
        """The S3 client, built on first access."""
        if self._client is None:
            self._client = self._client_factory(self._target)
        return self._client

    @property
    def bucket(self) -> str:
        return self._target.bucket_name

    # -----------------------------------------------------------------------
    # Bucket lifecycle
    # -----------------------------------------------------------------------

    def bucket_exists(self) -> bool:
        """
        Check whether the bucket exists and is reachable.

        Returns False when the provider reports the bucket as not found,
        meaning it has to be created. Any other failure (access denied,
        network trouble) is re-raised.
        """
        try:
            self.client.head_bucket(Bucket=self.bucket)
        except ClientError as e:
            if _error_code(e) in BUCKET_NOT_FOUND_CODES:
                self._log.info("Bucket is available", extra={"bucket": self.bucket})
                return False
            self._log.error(
                "Either you don't have access to bucket or another error occurred",
                extra={"bucket": self.bucket, "error": str(e)},
            )
            raise
        except BotoCoreError as e:
            self._log.error(
                "Either you don't have access to bucket or another error occurred",
                extra={"bucket": self.bucket, "error": str(e)},
            )
            raise

        self._log.info(
            "Bucket exists and you already own it",
            extra={"bucket": self.bucket},
        )
        return True

    def create_bucket(self) -> None:
        """
        Create the bucket as private with object lock enabled.

        When a retention policy is configured (even a disabled one),
        versioning is switched on as well, since per-object retention
        requires it.
        """
        params = {
            "Bucket": self.bucket,
            "ACL": "private",
            "ObjectLockEnabledForBucket": True,
        }
        location = self._location_constraint()
        if location:
            params["CreateBucketConfiguration"] = {"LocationConstraint": location}

        try:
            self.client.create_bucket(**params)
        except (ClientError, BotoCoreError) as e:
            self._log.error(
                "Couldn't create bucket in region",
                extra={"bucket": self.bucket, "region": location, "error": str(e)},
            )
            raise

        self._log.info(
            "Created bucket",
            extra={"bucket": self.bucket, "region": location},
        )

        if self._target.retention is not None:
            self._enable_versioning()

    def _enable_versioning(self) -> None:
        try:
            self.client.put_bucket_versioning(
                Bucket=self.bucket,
                VersioningConfiguration={"Status": "Enabled"},
            )
        except (ClientError, BotoCoreError) as e:
            self._log.error(
                "Failed to enable versioning for bucket",
                extra={"bucket": self.bucket, "error": str(e)},
            )
            raise

    def _location_constraint(self) -> Optional[str]:
        region = self._target.region or getattr(self.client.meta, "region_name", None)
        if not region or region == DEFAULT_REGION:
            return None
        return region

    # -----------------------------------------------------------------------
    # Objects
    # -----------------------------------------------------------------------

    def put_object(self, payload: bytes, key: str) -> None:
        """Store payload under key. Provider errors are re-raised as-is."""
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=bytes(payload),
            )
        except (ClientError, BotoCoreError) as e:
            self._log.error(
                "Failed to upload to S3",
                extra={"bucket": self.bucket, "key": key, "error": str(e)},
            )
            raise

        self._log.info(
            "Uploaded to S3",
            extra={
                "upload_id": key,
                "bucket": self.bucket,
                "size_bytes": len(payload),
            },
        )

    def apply_retention(self, key: str) -> bool:
        """
        Lock the object at key in compliance mode until the policy expires.

        Does nothing unless an enabled policy is configured. Failures are
        logged, not raised. Returns True if the lock was applied.
        """
        if not self._target.retention_enabled:
            return False
        policy = self._target.retention

        try:
            self.client.put_object_retention(
                Bucket=self.bucket,
                Key=key,
                Retention={
                    "Mode": "COMPLIANCE",
                    "RetainUntilDate": policy.expires_at,
                },
            )
        except (ClientError, BotoCoreError) as e:
            self._log.error(
                "Failed to add the retention policy",
                extra={"bucket": self.bucket, "key": key, "error": str(e)},
            )
            return False

        self._log.info(
            "Applied retention policy",
            extra={
                "bucket": self.bucket,
                "key": key,
                "retain_until": policy.expires_at.isoformat(),
            },
        )
        return True

    # -----------------------------------------------------------------------
    # Entry points
    # -----------------------------------------------------------------------

    def upload(self, payload: bytes, identifier: str) -> UploadResult:
        """
        Upload payload and return where it was stored.

        The key is a 12-character random hex prefix followed by identifier.

        Raises:
            ConfigurationError: credentials or config could not be loaded
            KeyGenerationError: no secure random source
            botocore.exceptions.ClientError / BotoCoreError: a provider call
                before or during PutObject failed
        """
        return self.upload_request(UploadRequest(payload=payload, identifier=identifier))

    def upload_request(self, request: UploadRequest) -> UploadResult:
        if not self.bucket_exists():
            self.create_bucket()

        key = generate_key(request.identifier)
        self.put_object(request.payload, key)
        retention_applied = self.apply_retention(key)

        return UploadResult(
            key=key,
            bucket=self.bucket,
            retention_applied=retention_applied,
        )
