from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from app.main import create_app
from datastore.error_log import ErrorLog
from services.telemetry import TelemetryService, build_default_service

BAD_REQUEST = {"error": "bad request"}


@pytest.fixture
def service() -> TelemetryService:
    return TelemetryService(error_log=ErrorLog())


@pytest.fixture
def api_client(service: TelemetryService, monkeypatch) -> Iterator[TestClient]:
    def build_test_service() -> TelemetryService:
        return service

    build_test_service.cache_clear = lambda: None  # type: ignore[attr-defined]

    monkeypatch.setattr("app.main.build_default_service", build_test_service)
    monkeypatch.setattr("app.api.build_default_service", build_test_service)

    app = create_app()
    with TestClient(app) as client:
        yield client


def test_lifespan_discards_service_on_shutdown() -> None:
    build_default_service.cache_clear()
    app = create_app()

    with TestClient(app) as client:
        service_during = build_default_service()
        client.post("/temp", json={"data": "broken"})
        assert service_during.list_errors() == ["broken"]

    service_after = build_default_service()
    try:
        assert service_after is not service_during
        assert service_after.list_errors() == []
    finally:
        build_default_service.cache_clear()


def test_overtemp_submission(api_client: TestClient) -> None:
    response = api_client.post("/temp", json={"data": "42:1690000000000:'Temperature':91.5"})

    assert response.status_code == 200
    assert response.json() == {
        "overtemp": True,
        "device_id": 42,
        "formatted_time": "2023-07-22 04:26:40",
    }


def test_normal_submission_omits_optional_fields(api_client: TestClient) -> None:
    response = api_client.post("/temp", json={"data": "42:1690000000000:'Temperature':50.0"})

    assert response.status_code == 200
    assert response.json() == {"overtemp": False}


def test_zero_device_id_is_omitted_from_overtemp_response(api_client: TestClient) -> None:
    response = api_client.post("/temp", json={"data": "0:1690000000000:'Temperature':95"})

    assert response.status_code == 200
    assert response.json() == {"overtemp": True, "formatted_time": "2023-07-22 04:26:40"}


def test_wrapped_zero_device_id_is_omitted(api_client: TestClient) -> None:
    response = api_client.post(
        "/temp", json={"data": "4294967296:1690000000000:'Temperature':95"}
    )

    assert response.status_code == 200
    assert "device_id" not in response.json()


def test_timestamp_beyond_datetime_range_is_accepted(api_client: TestClient) -> None:
    normal = api_client.post("/temp", json={"data": "42:999999999999999999:'Temperature':50"})
    overtemp = api_client.post("/temp", json={"data": "42:253402300800000:'Temperature':95"})

    assert normal.status_code == 200
    assert normal.json() == {"overtemp": False}
    assert overtemp.status_code == 200
    assert overtemp.json() == {
        "overtemp": True,
        "device_id": 42,
        "formatted_time": "10000-01-01 00:00:00",
    }
    assert api_client.get("/errors").json() == {"errors": []}


def test_invalid_payload_is_recorded(api_client: TestClient) -> None:
    raw = "42:1690000000000:Temperature:91.5"

    response = api_client.post("/temp", json={"data": raw})

    assert response.status_code == 400
    assert response.json() == BAD_REQUEST
    assert api_client.get("/errors").json() == {"errors": [raw]}


@pytest.mark.parametrize(
    "body",
    [b"not json", b"[1, 2]", b'{"data": 5}', b'{"data": null}', b""],
)
def test_malformed_envelope_is_not_recorded(api_client: TestClient, body: bytes) -> None:
    response = api_client.post(
        "/temp", content=body, headers={"Content-Type": "application/json"}
    )

    assert response.status_code == 400
    assert response.json() == BAD_REQUEST
    assert api_client.get("/errors").json() == {"errors": []}


def test_missing_data_key_is_recorded_as_empty(api_client: TestClient) -> None:
    response = api_client.post("/temp", json={"other": "field"})

    assert response.status_code == 400
    assert api_client.get("/errors").json() == {"errors": [""]}


@pytest.mark.parametrize("key", ["Data", "DATA", "dAtA"])
def test_data_key_matches_case_insensitively(api_client: TestClient, key: str) -> None:
    response = api_client.post("/temp", json={key: "42:1690000000000:'Temperature':50.0"})

    assert response.status_code == 200
    assert response.json() == {"overtemp": False}


def test_last_matching_data_key_wins(api_client: TestClient) -> None:
    body = {"data": "42:1690000000000:'Temperature':50", "DATA": "broken"}

    response = api_client.post("/temp", json=body)

    assert response.status_code == 400
    assert api_client.get("/errors").json() == {"errors": ["broken"]}


def test_errors_round_trip_verbatim(api_client: TestClient) -> None:
    raws = ["ünïcödé:1:2:3:4", "  spaced  ", "a:b:'Temperature':1", "\"quoted\"\n"]
    for raw in raws:
        assert api_client.post("/temp", json={"data": raw}).status_code == 400

    assert api_client.get("/errors").json() == {"errors": raws}


def test_delete_errors_clears_log(api_client: TestClient) -> None:
    api_client.post("/temp", json={"data": "broken"})

    response = api_client.delete("/errors")

    assert response.status_code == 200
    assert response.json() == {"message": "success"}
    assert api_client.get("/errors").json() == {"errors": []}
    assert api_client.delete("/errors").status_code == 200


def test_health(api_client: TestClient) -> None:
    response = api_client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
