"""Tests for key naming and validation."""

import pytest

from profstore.core.errors import ConfigurationError
from profstore.storage.keys import KeyNamer


class TestKeyNamer:
    """Tests for KeyNamer."""

    def test_item_key(self):
        """Test that item keys are prefixed tokens."""
        keys = KeyNamer()

        assert keys.item_key("abc123") == "sf_profiler_abc123"

    def test_index_key(self):
        """Test the shared index key."""
        assert KeyNamer().index_key() == "sf_profiler_index"

    def test_custom_prefix(self):
        """Test a custom namespace prefix."""
        keys = KeyNamer(prefix="app1_")

        assert keys.item_key("t") == "app1_t"
        assert keys.index_key() == "app1_index"

    def test_key_at_limit_is_accepted(self):
        """Test a key of exactly 250 bytes."""
        token = "x" * (250 - len("sf_profiler_"))

        assert len(KeyNamer().item_key(token)) == 250

    def test_key_over_limit_raises(self):
        """Test that a 251 byte key is rejected with details."""
        token = "x" * (251 - len("sf_profiler_"))

        with pytest.raises(ConfigurationError) as exc_info:
            KeyNamer().item_key(token)

        assert exc_info.value.length == 251
        assert exc_info.value.key == "sf_profiler_" + token
        assert "251 bytes" in str(exc_info.value)

    def test_length_is_measured_in_bytes(self):
        """Test that multibyte tokens are measured after UTF-8 encoding."""
        token = "é" * 120  # 120 characters, 240 bytes

        with pytest.raises(ConfigurationError) as exc_info:
            KeyNamer().item_key(token)

        assert exc_info.value.length == 252

    def test_index_token_is_reserved(self):
        """Test that the token 'index' cannot name an item key."""
        with pytest.raises(ConfigurationError) as exc_info:
            KeyNamer().item_key("index")

        assert exc_info.value.key == "sf_profiler_index"
        assert KeyNamer().item_key("index2") == "sf_profiler_index2"

    def test_prefix_too_long_fails_at_construction(self):
        """Test that an unusable prefix is rejected immediately."""
        with pytest.raises(ConfigurationError):
            KeyNamer(prefix="p" * 250)
