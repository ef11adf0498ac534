"""Unit tests for the configuration context."""

from concurrent.futures import ThreadPoolExecutor

import pytest

from src.catalog.runtime.config.config_data import ConfigData, DatabaseConfig
from src.catalog.runtime.context import (
    AppContext,
    get_config,
    get_context,
    with_context,
)


class TestContextManager:
    """Test the context manager functionality."""

    def test_default_context_available(self):
        context = get_context()

        assert isinstance(context, AppContext)
        assert isinstance(get_config(), ConfigData)
        assert context.config is get_config()

    def test_with_context_override_single_field(self):
        original_config = get_config()
        original_permission = original_config.products.required_permission

        override = ConfigData()
        override.products.required_permission = "edit products"

        with with_context(override):
            assert get_config().products.required_permission == "edit products"
            assert get_config() is not original_config

        assert get_config().products.required_permission == original_permission
        assert get_config() is original_config

    def test_partial_override_inherits_other_fields(self):
        original_config = get_config()

        override = ConfigData()
        override.products.owner_id = None

        with with_context(override):
            merged = get_config()
            assert merged.products.owner_id is None
            assert merged.products.log_channel == original_config.products.log_channel
            assert merged.database.url == original_config.database.url
            assert merged.authorization == original_config.authorization

    def test_assigned_section_replaces_whole_section(self):
        override = ConfigData()
        override.database = DatabaseConfig(url="sqlite:///:memory:")

        with with_context(override):
            assert get_config().database.url == "sqlite:///:memory:"
            assert get_config().database.pool_size == DatabaseConfig().pool_size

    def test_nested_overrides(self):
        original_level = get_config().logging.level
        level1 = ConfigData()
        level1.app.environment = "production"

        with with_context(level1):
            level2 = ConfigData()
            level2.logging.level = "DEBUG"

            with with_context(level2):
                assert get_config().app.environment == "production"
                assert get_config().logging.level == "DEBUG"

            assert get_config().app.environment == "production"
            assert get_config().logging.level == original_level

    def test_with_context_no_override(self):
        original_config = get_config()

        with with_context():
            assert get_config() is original_config

    def test_invalid_override_type(self):
        with pytest.raises(ValueError, match="config_override must be ConfigData"):
            with with_context({"app": {"environment": "test"}}):  # type: ignore[arg-type]
                pass

    def test_override_is_not_visible_in_other_threads(self):
        override = ConfigData()
        override.products.log_channel = "isolated"

        with with_context(override):
            with ThreadPoolExecutor(max_workers=1) as pool:
                seen = pool.submit(lambda: get_config().products.log_channel).result()

        assert seen != "isolated"
