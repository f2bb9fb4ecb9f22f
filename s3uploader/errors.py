"""
Exceptions raised by s3uploader.

Provider failures are not wrapped: botocore's ClientError and BotoCoreError
reach the caller exactly as boto3 raised them. The classes here cover the
failures that happen on our side of the wire.
"""


class UploaderError(Exception):
    """Base class for errors raised by this package."""
    pass


class ConfigurationError(UploaderError):
    """
    Raised when the storage target or credentials can't be used.

    Always raised before any call reaches the provider.
    """
    pass


class KeyGenerationError(UploaderError):
    """Raised when the OS can't supply secure random bytes for a key."""
    pass
