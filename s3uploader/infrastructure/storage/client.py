"""
S3 client construction.

Credentials are handed to boto3 explicitly instead of through process-wide
environment variables (AWS_CONFIG_FILE, AWS_SHARED_CREDENTIALS_FILE). Two
Uploaders pointed at different credential files can therefore live in the
same process without stepping on each other.
"""

import logging
import os
from typing import Optional

import boto3
import botocore.session
from botocore.config import Config
from botocore.exceptions import BotoCoreError

from ...core.models import CredentialSources, StorageTarget
from ...errors import ConfigurationError

logger = logging.getLogger(__name__)


def _check_file(path: str, label: str) -> None:
    if not os.path.isfile(path):
        raise ConfigurationError(f"{label} not found: {path}")


def build_session(
    credentials: Optional[CredentialSources] = None,
    region: Optional[str] = None,
) -> boto3.Session:
    """
    Create a boto3 session bound to the given credential sources.

    The file locations are set as config variables on a private botocore
    session, which is what the AWS_* environment variables would otherwise
    control. Anything not given falls through to the default chain.
    """
    botocore_session = botocore.session.Session()
    profile = None

    if credentials is not None:
        if credentials.config_file:
            _check_file(credentials.config_file, "AWS config file")
            botocore_session.set_config_variable(
                "config_file", credentials.config_file
            )
        if credentials.shared_credentials_file:
            _check_file(
                credentials.shared_credentials_file, "AWS shared credentials file"
            )
            botocore_session.set_config_variable(
                "credentials_file", credentials.shared_credentials_file
            )
        profile = credentials.profile

    try:
        return boto3.Session(
            botocore_session=botocore_session,
            profile_name=profile,
            region_name=region,
        )
    except BotoCoreError as e:
        raise ConfigurationError(f"Error loading AWS config: {e}") from e


def create_s3_client(target: StorageTarget):
    """
    Build an S3 client for a storage target.

    Credentials are resolved here, up front, so a missing or broken
    configuration fails before any request is sent.

    Raises:
        ConfigurationError: if the session can't be set up or no
            credentials can be found
    """
    session = build_session(target.credentials, target.region)

    try:
        resolved = session.get_credentials()
    except BotoCoreError as e:
        logger.error("Error loading AWS credentials", extra={"error": str(e)})
        raise ConfigurationError(f"Error loading AWS credentials: {e}") from e

    if resolved is None:
        logger.error(
            "No AWS credentials found",
            extra={"bucket": target.bucket_name},
        )
        raise ConfigurationError("No AWS credentials found")

    # S3-compatible providers behind a custom endpoint generally want
    # path-style addressing
    s3_options = {"addressing_style": "path"} if target.endpoint_url else {}
    boto_config = Config(signature_version="s3v4", s3=s3_options or None)

    try:
        client = session.client(
            "s3",
            endpoint_url=target.endpoint_url,
            config=boto_config,
        )
    except BotoCoreError as e:
        raise ConfigurationError(f"Error creating S3 client: {e}") from e

    logger.info(
        "Initialized S3 client",
        extra={
            "bucket": target.bucket_name,
            "region": client.meta.region_name,
            "endpoint": target.endpoint_url,
        },
    )
    return client
