"""
Unit tests for environment-driven settings.
"""

from datetime import datetime, timezone

import pytest

from s3uploader.config.settings import UploaderSettings, get_settings
from s3uploader.errors import ConfigurationError


def load(**env) -> UploaderSettings:
    return UploaderSettings(_env_file=None, **env)


class TestValidation:

    def test_bucket_is_required(self):
        assert load().validate_required_fields() == ["S3_BUCKET_NAME"]

    def test_enabled_retention_needs_expiry(self):
        settings = load(s3_bucket_name="b", retention_enabled=True)
        assert settings.validate_required_fields() == ["RETENTION_UNTIL or RETENTION_DAYS"]

    def test_missing_fields_raise_on_target(self):
        with pytest.raises(ConfigurationError, match="S3_BUCKET_NAME"):
            load().to_storage_target()

    def test_blank_bucket_is_missing(self):
        settings = load(s3_bucket_name="   ")

        assert settings.validate_required_fields() == ["S3_BUCKET_NAME"]
        with pytest.raises(ConfigurationError, match="S3_BUCKET_NAME"):
            settings.to_storage_target()


class TestStorageTarget:

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("S3_BUCKET_NAME", "test-foo-xyz")
        monkeypatch.setenv("AWS_REGION", "eu-west-1")
        monkeypatch.setenv("S3_ENDPOINT_URL", "http://localhost:9000")

        target = load().to_storage_target()

        assert target.bucket_name == "test-foo-xyz"
        assert target.region == "eu-west-1"
        assert target.endpoint_url == "http://localhost:9000"
        assert target.credentials is None
        assert target.retention is None

    def test_credential_sources(self, monkeypatch):
        monkeypatch.setenv("S3_BUCKET_NAME", "b")
        monkeypatch.setenv("AWS_SHARED_CREDENTIALS_FILE", "/etc/aws/credentials")
        monkeypatch.setenv("AWS_PROFILE", "uploader")

        credentials = load().to_storage_target().credentials

        assert credentials.shared_credentials_file == "/etc/aws/credentials"
        assert credentials.profile == "uploader"
        assert credentials.config_file is None

    def test_retention_until(self, monkeypatch):
        monkeypatch.setenv("S3_BUCKET_NAME", "b")
        monkeypatch.setenv("RETENTION_ENABLED", "true")
        monkeypatch.setenv("RETENTION_UNTIL", "2030-01-01T00:00:00+00:00")

        retention = load().to_storage_target().retention

        assert retention.enabled
        assert retention.expires_at == datetime(2030, 1, 1, tzinfo=timezone.utc)

    def test_retention_days(self):
        target = load(s3_bucket_name="b", retention_enabled=True, retention_days=7).to_storage_target()

        assert target.retention.enabled
        assert target.retention.expires_at > datetime.now(timezone.utc)

    def test_disabled_retention_still_present(self):
        target = load(s3_bucket_name="b", retention_enabled=False).to_storage_target()

        assert target.retention is not None
        assert not target.retention.enabled

    def test_naive_retention_until_rejected(self):
        settings = load(
            s3_bucket_name="b",
            retention_enabled=True,
            retention_until=datetime(2030, 1, 1),
        )
        with pytest.raises(ConfigurationError, match="timezone-aware"):
            settings.to_storage_target()


def test_get_settings_is_cached(monkeypatch):
    monkeypatch.setenv("S3_BUCKET_NAME", "first")
    first = get_settings()
    monkeypatch.setenv("S3_BUCKET_NAME", "second")

    assert get_settings() is first
    assert first.s3_bucket_name == "first"
