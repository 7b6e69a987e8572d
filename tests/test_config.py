"""Tests for configuration objects."""

from __future__ import annotations

from datetime import timedelta

import pytest

from storefront.config import ApiConfig, PollingPolicy


class TestPollingPolicy:
    def test_defaults(self) -> None:
        policy = PollingPolicy()

        assert policy.interval == timedelta(seconds=5)
        assert policy.max_attempts == 180
        assert policy.max_retries == 3
        assert policy.budget == timedelta(minutes=15)

    def test_with_methods_return_new_instances(self) -> None:
        base = PollingPolicy()

        tuned = base.with_interval(seconds=2).with_max_attempts(10).with_max_retries(0)

        assert tuned == PollingPolicy(timedelta(seconds=2), 10, 0)
        assert base == PollingPolicy()

    @pytest.mark.parametrize(
        "build",
        [
            lambda: PollingPolicy().with_interval(seconds=0),
            lambda: PollingPolicy().with_max_attempts(0),
            lambda: PollingPolicy().with_max_retries(-1),
        ],
    )
    def test_invalid_values_rejected(self, build) -> None:
        with pytest.raises(ValueError):
            build()

    def test_from_env(self) -> None:
        policy = PollingPolicy.from_env({
            "STOREFRONT_POLL_INTERVAL": "1.5",
            "STOREFRONT_POLL_MAX_ATTEMPTS": "40",
        })

        assert policy.interval == timedelta(seconds=1.5)
        assert policy.max_attempts == 40
        assert policy.max_retries == 3


class TestApiConfig:
    def test_from_env(self) -> None:
        config = ApiConfig.from_env({
            "STOREFRONT_API_URL": "https://api.shop.test",
            "STOREFRONT_API_TIMEOUT": "3",
            "STOREFRONT_API_TOKEN": "tok",
        })

        assert config == ApiConfig("https://api.shop.test", 3.0, "tok")
        assert config.headers["Authorization"] == "Bearer tok"

    def test_defaults_without_env(self) -> None:
        config = ApiConfig.from_env({})

        assert config == ApiConfig()
        assert "Authorization" not in config.headers
        assert config.with_token("t").headers["Authorization"] == "Bearer t"
