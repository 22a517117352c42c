"""
Tests for application settings.
"""

import pytest
from pydantic import ValidationError

from propzing.config import Settings, DEFAULT_DATABASE_URL


def make_settings(**overrides) -> Settings:
    overrides.setdefault("jwt_secret_key", "x" * 40)
    return Settings(_env_file=None, **overrides)


class TestSettings:

    def test_database_url_built_from_components(self):
        settings = make_settings(
            database_url=DEFAULT_DATABASE_URL,
            postgres_user="admin",
            postgres_password="pw",
            postgres_host="pg",
            postgres_db="listings",
        )
        assert settings.database_url == "postgresql+asyncpg://admin:pw@pg:5432/listings"

    @pytest.mark.parametrize("url", [
        "postgresql://u:p@host:5432/db",
        "postgres://u:p@host:5432/db",
    ])
    def test_async_driver_is_forced(self, url):
        assert make_settings(database_url=url).database_url == "postgresql+asyncpg://u:p@host:5432/db"

    def test_sqlite_url_untouched(self):
        assert make_settings(database_url="sqlite+aiosqlite:///:memory:").database_url == "sqlite+aiosqlite:///:memory:"

    def test_environment_helpers(self):
        assert make_settings(environment="development").is_development is True
        assert make_settings(environment="testing").is_testing is True
        assert make_settings(environment="staging", testing=True).is_testing is True
        assert make_settings(environment="production").is_production is True

    def test_unknown_environment(self):
        with pytest.raises(ValidationError):
            make_settings(environment="qa")

    def test_short_jwt_secret(self):
        with pytest.raises(ValidationError):
            make_settings(jwt_secret_key="short")

    def test_exchange_rates_normalized(self):
        settings = make_settings(exchange_rates={"usd": 3.67, "Eur": 4.0})
        assert settings.exchange_rates == {"USD": 3.67, "EUR": 4.0}

        with pytest.raises(ValidationError):
            make_settings(exchange_rates={"USD": 0})

    def test_storage_configuration(self):
        partial = make_settings(cloudflare_account_id="acc123", r2_bucket_name="listings")
        assert partial.storage_configured is False
        assert partial.r2_endpoint_url == "https://acc123.r2.cloudflarestorage.com"

        full = make_settings(
            cloudflare_account_id="acc123",
            r2_access_key_id="key",
            r2_secret_access_key="secret",
            r2_bucket_name="listings",
            r2_bucket_public_domain="media.propzing.com",
        )
        assert full.storage_configured is True
        assert make_settings(cloudflare_account_id=None).r2_endpoint_url is None
