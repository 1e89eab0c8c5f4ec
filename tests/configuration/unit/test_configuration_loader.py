"""Configuration loader tests."""

from __future__ import annotations

import pytest
from jellyfaas_cli.configuration.loader import ConfigurationError, load_configuration


def test_defaults_are_used_without_overrides() -> None:
    configuration = load_configuration({})

    assert configuration.service.core_service_url == "https://api.jellyfaas.com/core-service/v1"
    assert configuration.service.upload_url == (
        "https://api.jellyfaas.com/core-service/v1/upload"
    )
    assert configuration.service.api_key_header == "x-jf-apikey"
    assert configuration.polling.max_rounds == 10
    assert configuration.polling.interval_seconds == 30.0


def test_environment_overrides_are_applied() -> None:
    configuration = load_configuration(
        {
            "JELLYFAAS_CORE_SERVICE_URL": "http://localhost:8080/core/",
            "JELLYFAAS_POLL_MAX_ROUNDS": "3",
            "JELLYFAAS_POLL_INTERVAL_SECONDS": "0",
            "JELLYFAAS_REQUEST_TIMEOUT_SECONDS": "5",
        }
    )

    assert configuration.service.core_service_url == "http://localhost:8080/core"
    assert configuration.service.request_timeout_seconds == 5
    assert configuration.polling.max_rounds == 3
    assert configuration.polling.interval_seconds == 0.0


@pytest.mark.parametrize(
    ("environ", "message"),
    [
        ({"JELLYFAAS_POLL_MAX_ROUNDS": "zero"}, "must be an integer"),
        ({"JELLYFAAS_POLL_MAX_ROUNDS": "0"}, "greater than zero"),
        ({"JELLYFAAS_POLL_INTERVAL_SECONDS": "-1"}, "must not be negative"),
        ({"JELLYFAAS_CORE_SERVICE_URL": "ftp://example.com"}, "http(s) URL"),
        ({"JELLYFAAS_API_KEY_HEADER": "  "}, "must not be empty"),
    ],
)
def test_invalid_overrides_raise_configuration_error(environ: dict, message: str) -> None:
    with pytest.raises(ConfigurationError) as exc_info:
        load_configuration(environ)

    assert message in str(exc_info.value)
