import httpx
import pytest

from commandy.services.port_authority import PortAuthorityClient, PortAuthorityError, format_ports


def _install_transport(monkeypatch, handler) -> list[httpx.Request]:
    requests: list[httpx.Request] = []
    real_client = httpx.Client

    def recording(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return handler(request)

    def fake_client(*args, **kwargs):
        kwargs["transport"] = httpx.MockTransport(recording)
        return real_client(*args, **kwargs)

    monkeypatch.setattr(httpx, "Client", fake_client)
    return requests


def test_fetch_ports_reads_registry(monkeypatch) -> None:
    requests = _install_transport(
        monkeypatch,
        lambda request: httpx.Response(200, json={"ports": [{"port": 3000, "project": "web"}]}),
    )
    client = PortAuthorityClient("http://localhost:3030/api/")

    assert client.registered_ports_text() == "Port 3000: web"
    assert str(requests[0].url) == "http://localhost:3030/api/ports"


def test_fetch_ports_http_error_carries_status(monkeypatch) -> None:
    _install_transport(monkeypatch, lambda request: httpx.Response(503, text="down"))
    client = PortAuthorityClient("http://localhost:3030/api")

    with pytest.raises(PortAuthorityError) as raised:
        client.fetch_ports()

    assert raised.value.status_code == 503
    assert str(raised.value) == "Port Authority request failed | status=503"


def test_fetch_ports_unreachable(monkeypatch) -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    _install_transport(monkeypatch, refuse)

    with pytest.raises(PortAuthorityError) as raised:
        PortAuthorityClient("http://localhost:3030/api").fetch_ports()

    assert raised.value.status_code is None
    assert "unreachable" in str(raised.value)


def test_fetch_ports_plain_text_body(monkeypatch) -> None:
    _install_transport(monkeypatch, lambda request: httpx.Response(200, text="3000 web\n"))
    assert PortAuthorityClient("http://localhost:3030/api").registered_ports_text() == "3000 web"


def test_format_ports_variants() -> None:
    assert format_ports([]) == "No ports registered"
    assert format_ports([{"port": 5432, "service": "postgres"}, 8080]) == "Port 5432: postgres\n8080"
    assert format_ports([{"port": 9000}]) == "Port 9000"
    assert format_ports({"web": 3000}) == "web: 3000"
