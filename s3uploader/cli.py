"""
Command-line entry point.

Upload a file (or stdin) and print the generated key:

    s3-uploader report.pdf --bucket my-bucket --retain-days 30
    cat data.bin | s3-uploader - --identifier data.bin

Flags override the environment settings in s3uploader.config.
"""

import argparse
import logging
import os
import sys
from typing import Optional, Sequence

from botocore.exceptions import BotoCoreError, ClientError
from pydantic import ValidationError

from .config.settings import UploaderSettings, get_settings
from .core.uploader import Uploader
from .errors import ConfigurationError, UploaderError

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="s3-uploader",
        description="Upload a file to S3 under a random key, creating the bucket if needed",
    )
    parser.add_argument("path", help="File to upload, or - for stdin")
    parser.add_argument("--identifier", help="Label appended to the key (default: file name)")
    parser.add_argument("--bucket", help="Bucket name (env: S3_BUCKET_NAME)")
    parser.add_argument("--config-file", help="AWS config file (env: AWS_CONFIG_FILE)")
    parser.add_argument(
        "--credentials-file",
        help="AWS shared credentials file (env: AWS_SHARED_CREDENTIALS_FILE)",
    )
    parser.add_argument("--profile", help="AWS profile name (env: AWS_PROFILE)")
    parser.add_argument("--region", help="AWS region (env: AWS_REGION)")
    parser.add_argument("--endpoint-url", help="Endpoint for S3-compatible providers")

    retention = parser.add_mutually_exclusive_group()
    retention.add_argument(
        "--retain-days",
        type=int,
        help="Lock the object in compliance mode for this many days",
    )
    retention.add_argument(
        "--no-retention-lock",
        action="store_true",
        help="Enable bucket versioning on creation but don't lock the object",
    )

    parser.add_argument("--log-level", help="Logging level (env: LOG_LEVEL)")
    return parser


def apply_overrides(settings: UploaderSettings, args: argparse.Namespace) -> UploaderSettings:
    """Return a copy of settings with the command-line flags applied."""
    flags = {
        "s3_bucket_name": args.bucket,
        "aws_config_file": args.config_file,
        "aws_shared_credentials_file": args.credentials_file,
        "aws_profile": args.profile,
        "aws_region": args.region,
        "s3_endpoint_url": args.endpoint_url,
        "log_level": args.log_level,
    }
    update = {name: value for name, value in flags.items() if value is not None}

    if args.retain_days is not None:
        # a relative expiry on the command line replaces any absolute one
        update.update(
            retention_enabled=True,
            retention_days=args.retain_days,
            retention_until=None,
        )
    elif args.no_retention_lock:
        update["retention_enabled"] = False

    return settings.model_copy(update=update)


def _read_payload(path: str) -> bytes:
    if path == "-":
        return sys.stdin.buffer.read()
    with open(path, "rb") as f:
        return f.read()


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.path == "-" and not args.identifier:
        parser.error("--identifier is required when reading from stdin")
    if args.retain_days is not None and args.retain_days < 1:
        parser.error("--retain-days must be at least 1")

    try:
        settings = apply_overrides(get_settings(), args)
    except ValidationError as e:
        logger.error("Invalid configuration", extra={"error": str(e)})
        print(f"ERROR: Invalid configuration: {e}", file=sys.stderr)
        return EXIT_CONFIG

    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=settings.log_level.upper(),
    )

    try:
        target = settings.to_storage_target()
    except ConfigurationError as e:
        logger.error("Invalid configuration", extra={"error": str(e)})
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_CONFIG

    try:
        payload = _read_payload(args.path)
    except OSError as e:
        print(f"ERROR: Cannot read {args.path}: {e}", file=sys.stderr)
        return EXIT_FAILURE

    identifier = args.identifier or os.path.basename(args.path)

    try:
        result = Uploader(target).upload(payload, identifier)
    except ConfigurationError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_CONFIG
    except (UploaderError, ClientError, BotoCoreError) as e:
        print(f"ERROR: Upload failed: {e}", file=sys.stderr)
        return EXIT_FAILURE

    logger.info(
        "Success!",
        extra={
            "upload_id": result.key,
            "uri": result.uri,
            "retention_applied": result.retention_applied,
        },
    )
    print(result.key)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
