"""Tests for the configuration value."""

from __future__ import annotations

import dataclasses

import pytest

from loc_stats.config import Config
from loc_stats.exceptions import ConfigurationError


def test_validate_returns_config():
    config = Config(token="t")
    assert config.validate() is config


@pytest.mark.parametrize("token", ["", "   "])
def test_validate_requires_token(token):
    with pytest.raises(ConfigurationError, match="token"):
        Config(token=token).validate()


def test_validate_rejects_unknown_format():
    with pytest.raises(ConfigurationError, match="format"):
        Config(token="t", output_format="xml").validate()


def test_validate_rejects_negative_retries_and_timeouts():
    with pytest.raises(ConfigurationError):
        Config(token="t", retries=-1).validate()
    with pytest.raises(ConfigurationError):
        Config(token="t", clone_timeout=-5).validate()


def test_type_filter():
    assert Config(token="t").type_filter == "all"
    assert Config(token="t", include_private=False).type_filter == "public"


def test_config_is_immutable():
    config = Config(token="t")
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.include_forks = True  # type: ignore[misc]


@pytest.mark.parametrize("field", ["http_timeout", "clone_timeout", "count_timeout"])
def test_validate_rejects_zero_timeouts(field):
    with pytest.raises(ConfigurationError, match=field):
        Config(token="t", **{field: 0}).validate()


def test_validate_allows_unset_subprocess_timeouts():
    Config(token="t", clone_timeout=None, count_timeout=None).validate()


def test_validate_rejects_negative_backoff():
    with pytest.raises(ConfigurationError, match="retry_backoff"):
        Config(token="t", retry_backoff=-1).validate()
