import pytest
from starlette.testclient import TestClient

from signalstash.application import Application, _parse_bind_address, main
from signalstash.config import DEFAULT_SENSOR_DATUM_PREFIX


def test_build_defaults():
    app = Application.build({})
    assert app.settings.bind_address == "0.0.0.0:20120"
    assert app.settings.redis_url == "redis://localhost:6379"
    assert app.settings.sensor_datum_prefix == DEFAULT_SENSOR_DATUM_PREFIX


def test_build_custom_settings():
    app = Application.build(
        {
            "BIND_ADDRESS": "127.0.0.1:12345",
            "REDIS_URL": "redis://custom:1234",
            "SENSOR_DATUM_PREFIX": "customprefix",
        }
    )
    assert app.settings.bind_address == "127.0.0.1:12345"
    assert app.settings.redis_url == "redis://custom:1234"
    assert app.settings.sensor_datum_prefix == "customprefix"


def test_build_merges_all_routes():
    app = Application.build({})
    paths = {route.path for route in app.router.routes}
    assert paths == {"/healthz", "/readyz", "/startz", "/ingest"}


def test_built_router_serves_probes():
    client = TestClient(Application.build({}).router)
    assert client.get("/healthz").text == "ok"
    assert client.get("/startz").text == "started"


def test_build_rejects_invalid_log_level():
    with pytest.raises(ValueError):
        Application.build({"LOG_LEVEL": "INVALID"})


def test_parse_bind_address():
    assert _parse_bind_address("0.0.0.0:20120") == ("0.0.0.0", 20120)
    assert _parse_bind_address("127.0.0.1:12345") == ("127.0.0.1", 12345)
    assert _parse_bind_address("[::1]:12345") == ("::1", 12345)


@pytest.mark.parametrize(
    "address",
    ["localhost:80", "127.0.0.1", "127.0.0.1:port", "127.0.0.1:70000", "::1:80"],
)
def test_parse_bind_address_rejects(address):
    with pytest.raises(ValueError):
        _parse_bind_address(address)


@pytest.mark.asyncio
async def test_run_rejects_invalid_bind_address():
    app = Application.build({"BIND_ADDRESS": "not-an-address"})
    with pytest.raises(ValueError):
        await app.run()


def test_main_rejects_invalid_log_level(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "INVALID")
    with pytest.raises(ValueError):
        main([])


def test_main_rejects_invalid_bind_address(monkeypatch):
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.setenv("BIND_ADDRESS", "nowhere")
    with pytest.raises(ValueError):
        main([])