"""Tests for the context-scoped configuration override."""

import pytest

from membership.app.runtime.config.config_data import (
    ConfigData,
    SecurityConfig,
    SiteConfig,
)
from membership.app.runtime.context import get_config, with_context


class TestWithContext:
    def test_override_applies_inside_block_only(self):
        before = get_config().site.name
        override = ConfigData(site=SiteConfig(name="Chamber of Commerce"))

        with with_context(override):
            assert get_config().site.name == "Chamber of Commerce"

        assert get_config().site.name == before

    def test_unset_fields_keep_current_values(self):
        current = get_config()
        override = ConfigData(security=SecurityConfig(reset_token_ttl_seconds=60))

        with with_context(override):
            cfg = get_config()
            assert cfg.security.reset_token_ttl_seconds == 60
            assert cfg.security.bcrypt_rounds == current.security.bcrypt_rounds
            assert cfg.database.url == current.database.url

    def test_nested_overrides_stack(self):
        with with_context(ConfigData(site=SiteConfig(name="Outer"))):
            with with_context(ConfigData(site=SiteConfig(email="inner@example.com"))):
                cfg = get_config()
                assert cfg.site.name == "Outer"
                assert cfg.site.email == "inner@example.com"
            assert get_config().site.name == "Outer"

    def test_none_is_a_no_op(self):
        before = get_config()
        with with_context(None):
            assert get_config() is before

    def test_rejects_non_config(self):
        with pytest.raises(ValueError):
            with with_context({"site": {"name": "x"}}):  # type: ignore[arg-type]
                pass

    def test_test_fixture_config_is_active(self):
        cfg = get_config()
        assert cfg.app.environment == "test"
        assert cfg.security.bcrypt_rounds == 4
