"""
Uploader configuration using Pydantic settings.

Configuration is loaded from environment variables (and a .env file) with
sensible defaults. Only the bucket name is required; everything else falls
back to boto3's own defaults.
"""

from datetime import datetime
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..core.models import CredentialSources, RetentionPolicy, StorageTarget
from ..errors import ConfigurationError


class UploaderSettings(BaseSettings):
    """
    Settings loaded from environment variables.

    Retention has three states: RETENTION_ENABLED unset means no policy at
    all, false means versioning without object locks, true means every
    upload is locked until RETENTION_UNTIL (or RETENTION_DAYS from now).
    """

    # Bucket
    s3_bucket_name: str = Field(
        default="",
        description="Bucket to upload into. Created on first upload if missing."
    )
    aws_region: Optional[str] = Field(
        default=None,
        description="Region for the client and for new buckets. Defaults to the AWS config."
    )
    s3_endpoint_url: Optional[str] = Field(
        default=None,
        description="Custom endpoint for S3-compatible providers (MinIO, R2, ...)."
    )

    # Credentials
    aws_config_file: Optional[str] = Field(
        default=None,
        description="Path to an AWS config file, instead of ~/.aws/config"
    )
    aws_shared_credentials_file: Optional[str] = Field(
        default=None,
        description="Path to an AWS shared credentials file, instead of ~/.aws/credentials"
    )
    aws_profile: Optional[str] = Field(
        default=None,
        description="Profile to use from the config/credentials files"
    )

    # Retention
    retention_enabled: Optional[bool] = Field(
        default=None,
        description="Unset: no retention. False: versioning only. True: compliance lock per object."
    )
    retention_days: Optional[int] = Field(
        default=None,
        ge=1,
        description="Lock objects for this many days from upload time"
    )
    retention_until: Optional[datetime] = Field(
        default=None,
        description="Absolute lock expiry (ISO 8601 with timezone). Wins over retention_days."
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    def validate_required_fields(self) -> list[str]:
        """Return the names of required settings that are missing."""
        missing = []

        if not self.s3_bucket_name.strip():
            missing.append("S3_BUCKET_NAME")

        if self.retention_enabled and not (self.retention_until or self.retention_days):
            missing.append("RETENTION_UNTIL or RETENTION_DAYS")

        return missing

    def credential_sources(self) -> Optional[CredentialSources]:
        if not (self.aws_config_file or self.aws_shared_credentials_file or self.aws_profile):
            return None
        return CredentialSources(
            config_file=self.aws_config_file,
            shared_credentials_file=self.aws_shared_credentials_file,
            profile=self.aws_profile,
        )

    def retention_policy(self) -> Optional[RetentionPolicy]:
        if self.retention_enabled is None:
            return None

        enabled = self.retention_enabled
        try:
            if self.retention_until is not None:
                return RetentionPolicy(enabled=enabled, expires_at=self.retention_until)
            if self.retention_days is not None:
                return RetentionPolicy.from_days(self.retention_days, enabled=enabled)
        except ValueError as e:
            raise ConfigurationError(f"Invalid retention settings: {e}") from e

        if enabled:
            raise ConfigurationError(
                "RETENTION_UNTIL or RETENTION_DAYS is required when retention is enabled"
            )
        # Disabled policies never lock anything, the expiry is a placeholder
        return RetentionPolicy.from_days(1, enabled=False)

    def to_storage_target(self) -> StorageTarget:
        """
        Build the StorageTarget an Uploader needs.

        Raises:
            ConfigurationError: if required settings are missing or invalid
        """
        missing = self.validate_required_fields()
        if missing:
            raise ConfigurationError(
                f"Missing required configuration: {', '.join(missing)}"
            )

        try:
            return StorageTarget(
                bucket_name=self.s3_bucket_name,
                credentials=self.credential_sources(),
                retention=self.retention_policy(),
                region=self.aws_region,
                endpoint_url=self.s3_endpoint_url,
            )
        except ValueError as e:
            raise ConfigurationError(f"Invalid storage target: {e}") from e


@lru_cache()
def get_settings() -> UploaderSettings:
    """
    Get cached settings instance.

    For tests, call get_settings.cache_clear() to reset.
    """
    return UploaderSettings()
