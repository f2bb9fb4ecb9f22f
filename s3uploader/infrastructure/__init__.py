"""
Infrastructure layer - external service integrations.

- storage: boto3 S3 client construction
"""
