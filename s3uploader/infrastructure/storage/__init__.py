"""
Object storage integration.

Supports Amazon S3 and S3-compatible providers through boto3.
"""

from .client import build_session, create_s3_client

__all__ = ["build_session", "create_s3_client"]
