from __future__ import annotations

import httpx
import pytest

from weather_relay.core.errors import ProviderError
from weather_relay.services.provider import OpenWeatherClient, parse_report

URL = "https://weather.test/data/2.5/weather"

RENO_PAYLOAD = {
    "name": "Reno",
    "cod": 200,
    "weather": [
        {"id": 800, "main": "Clear", "description": "clear sky", "icon": "01d"},
        {"id": 721, "main": "Haze", "description": "haze", "icon": "50d"},
    ],
    "main": {"temp": 276.1, "temp_min": 274.0, "temp_max": 278.0, "humidity": 40},
}


def _client(handler, **kwargs) -> OpenWeatherClient:
    transport = httpx.MockTransport(handler)
    return OpenWeatherClient(api_key="secret", url=URL, client=httpx.Client(transport=transport), **kwargs)


def test_fetch_current_sends_city_and_key() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=RENO_PAYLOAD)

    report = _client(handler).fetch_current("Reno")

    assert seen[0].url.params["q"] == "Reno"
    assert seen[0].url.params["appid"] == "secret"
    assert "units" not in seen[0].url.params
    assert report.ok
    assert report.temp_min == 274.0
    assert report.temp_max == 278.0
    assert report.labels == ["Clear", "Haze"]


def test_fetch_current_passes_units_when_configured() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=RENO_PAYLOAD)

    _client(handler, units="metric").fetch_current("Reno")

    assert seen[0].url.params["units"] == "metric"


def test_not_found_is_reported_with_message() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"cod": "404", "message": "city not found"})

    report = _client(handler).fetch_current("Atlantis")

    assert not report.ok
    assert report.status_code == 404
    assert report.message == "city not found"


def test_transport_failure_raises_provider_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ProviderError) as excinfo:
        _client(handler).fetch_current("Reno")

    assert "connection refused" in excinfo.value.message


def test_non_json_body_raises_provider_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="<html>bad gateway</html>")

    with pytest.raises(ProviderError) as excinfo:
        _client(handler).fetch_current("Reno")

    assert "502" in excinfo.value.message


def test_parse_report_falls_back_to_http_status() -> None:
    report = parse_report({"message": "Invalid API key"}, fallback_status=401)

    assert report.status_code == 401
    assert report.message == "Invalid API key"
    assert report.labels == []
    assert report.temp_min is None
