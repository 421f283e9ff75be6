from __future__ import annotations

from datetime import datetime, timedelta

from weather_relay.services.provider import ProviderReport


def test_status_and_health(client) -> None:
    assert client.get("/api/v1/status").json() == {"message": "ok"}
    assert client.get("/api/v1/health").json() == {"status": "ok"}


def test_location_weather_reports_fresh_reading(client, gateway) -> None:
    response = client.get("/api/v1/location/weather", params={"city": "reno"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["city_name"] == "Reno"
    assert payload["conditions"] == ["Clear"]
    assert payload["low_temp"] == 274.0
    assert payload["high_temp"] == 278.0
    assert payload["median_temp"] == 276.0
    assert payload["at_time"]
    assert gateway.calls == ["Reno"]


def test_location_weather_second_request_hits_cache(client, gateway) -> None:
    first = client.get("/api/v1/location/weather", params={"city": "Reno"}).json()
    second = client.get("/api/v1/location/weather", params={"city": "RENO"}).json()

    assert gateway.calls == ["Reno"]
    assert second["at_time"] == first["at_time"]

    stats = client.get("/api/v1/location/weather/stats", params={"count": "query"}).json()
    assert stats == {"count": {"location_queries": 2}}


def test_location_weather_requires_city(client) -> None:
    assert client.get("/api/v1/location/weather").status_code == 422


def test_location_weather_provider_failure(client, gateway) -> None:
    gateway.report = ProviderReport(status_code=404, message="city not found")

    response = client.get("/api/v1/location/weather", params={"city": "Atlantis"})

    assert response.status_code == 502
    assert response.json() == {"message": "city not found"}


def test_location_weather_blank_city_is_a_client_error(client, gateway) -> None:
    response = client.get("/api/v1/location/weather", params={"city": "   "})

    assert response.status_code == 400
    assert response.json() == {"message": "a city name is required"}
    assert gateway.calls == []


def test_refresh_locks_do_not_accumulate_per_city(client, gateway) -> None:
    gateway.report = ProviderReport(status_code=404, message="city not found")

    for i in range(50):
        response = client.get("/api/v1/location/weather", params={"city": f"nowhere{i}"})
        assert response.status_code == 502

    assert len(client.app.state.refresh_locks) == 0


def test_location_weather_reports_utc_timestamp(client) -> None:
    payload = client.get("/api/v1/location/weather", params={"city": "Reno"}).json()

    at = datetime.fromisoformat(payload["at_time"].replace("Z", "+00:00"))
    assert at.utcoffset() == timedelta(0)


def test_stats_without_parameters_lists_options(client) -> None:
    response = client.get("/api/v1/location/weather/stats")

    assert response.status_code == 202
    assert "temp=lows|highs|avgs" in response.json()["valid_query_parameters"]


def test_stats_bogus_temperature_filter(client) -> None:
    client.get("/api/v1/location/weather", params={"city": "Reno"})

    response = client.get("/api/v1/location/weather/stats", params={"temp": "bogus"})

    assert response.status_code == 400
    body = response.json()
    assert "temperatures" not in body
    assert "bogus" in body["message"]


def test_stats_full_document(client) -> None:
    reading = client.get("/api/v1/location/weather", params={"city": "Reno"}).json()
    at = datetime.fromisoformat(reading["at_time"].replace("Z", "+00:00"))

    response = client.get(
        "/api/v1/location/weather/stats",
        params=[
            ("count", "query"),
            ("count", "labels"),
            ("summary", "day"),
            ("temp", "lows"),
            ("temp", "avgs"),
        ],
    )

    assert response.status_code == 200
    stats = response.json()
    assert stats["count"] == {"location_queries": 1, "labels": ["Clear"]}
    assert [entry["city_name"] for entry in stats["summary"]["daily"]["Clear"]] == ["Reno"]
    year, month, day = str(at.year), str(at.month), str(at.day)
    assert stats["temperatures"]["lows"]["Reno"][year][month][day] == [274.0]
    assert stats["temperatures"]["avgs"]["Reno"][year][month] == {"0": [276.0]}


def test_account_registration_and_lookup(client) -> None:
    created = client.post("/api/v1/account/user/register", json={"username": "ada"})

    assert created.status_code == 200
    body = created.json()
    assert body["name"] == "ada"
    assert body["bookmark_collection_id"] == body["id"]
    assert body["bookmarked_location_ids"] == []

    again = client.post("/api/v1/account/user/register", json={"username": "ada"}).json()
    assert again["id"] == body["id"]

    fetched = client.get("/api/v1/account/user", params={"username": "ada"}).json()
    assert fetched == {"name": "ada", "id": body["id"]}


def test_missing_account_is_a_message(client) -> None:
    response = client.get("/api/v1/account/user", params={"username": "ghost"})

    assert response.status_code == 200
    assert response.json() == {"message": "no account found with that username: ghost"}


def test_bookmarks_resolve_known_locations(client) -> None:
    client.get("/api/v1/location/weather", params={"city": "Reno"})
    client.post("/api/v1/account/user/register", json={"username": "ada"})

    response = client.post(
        "/api/v1/account/user/bookmark",
        json={"username": "ada", "locations": ["reno", "Atlantis", "Reno"]},
    )

    assert response.status_code == 200
    assert response.json() == {"bookmarks": ["Reno"]}
    listed = client.get("/api/v1/account/user/bookmark", params={"username": "ada"}).json()
    assert listed == {"bookmarks": ["Reno"]}


def test_bookmarks_for_missing_account(client) -> None:
    response = client.post(
        "/api/v1/account/user/bookmark", json={"username": "ghost", "locations": ["Reno"]}
    )

    assert response.status_code == 200
    assert response.json()["message"].startswith("no account found")
