"""Unit tests for the configuration context."""

import asyncio

import pytest

from src.storefront.runtime.config.config_data import ConfigData
from src.storefront.runtime.context import (
    AppContext,
    get_config,
    get_context,
    with_context,
)


class TestContextManager:
    """Test the context manager functionality."""

    def test_default_context_available(self):
        """Should have a default context available."""
        context = get_context()

        assert isinstance(context, AppContext)
        assert isinstance(get_config(), ConfigData)
        assert context.config is get_config()

    def test_with_context_override_single_level(self):
        """Only explicitly set fields replace the current values."""
        original = get_config()

        override = ConfigData()
        override.store.whatsapp_number = "15550001111"

        with with_context(override):
            config = get_config()
            assert config.store.whatsapp_number == "15550001111"
            assert config.store.featured_limit == original.store.featured_limit
            assert config.app.host == original.app.host

        assert get_config() is original

    def test_with_context_nested_overrides(self):
        original = get_config()
        level1 = ConfigData()
        level1.store.featured_limit = 2

        level2 = ConfigData()
        level2.app.session_max_age = 60

        with with_context(level1):
            with with_context(level2):
                config = get_config()
                assert config.store.featured_limit == 2
                assert config.app.session_max_age == 60
            assert get_config().app.session_max_age == original.app.session_max_age
            assert get_config().store.featured_limit == 2

        assert get_config() is original

    def test_with_context_none_is_noop(self):
        original = get_config()

        with with_context(None):
            assert get_config() is original

    def test_with_context_rejects_other_types(self):
        with pytest.raises(ValueError, match="must be ConfigData"):
            with with_context({"store": {}}):
                pass

    @pytest.mark.asyncio
    async def test_override_is_isolated_per_task(self):
        """Tasks started outside an override do not see it."""
        seen = {}

        async def read(name: str) -> None:
            await asyncio.sleep(0)
            seen[name] = get_config().store.whatsapp_number

        override = ConfigData()
        override.store.whatsapp_number = "999"

        outside = asyncio.create_task(read("outside"))
        with with_context(override):
            inside = asyncio.create_task(read("inside"))
            await asyncio.gather(outside, inside)

        assert seen["inside"] == "999"
        assert seen["outside"] == get_config().store.whatsapp_number
