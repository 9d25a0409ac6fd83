from datetime import datetime, timezone

import pytest

from pod_registration.core.errors import TokenStoreError
from pod_registration.models.schemas import RegisteredService
from pod_registration.services.endpoint import coerce_local_endpoint
from pod_registration.services.token_store import TokenFileStore
from pod_registration.services.tunnel import MockTunnel, StaticTunnel
from pod_registration.services.validator import is_absolute_url


@pytest.mark.parametrize(
    "value,expected",
    [
        (3000, "http://localhost:3000"),
        ("8080", "http://localhost:8080"),
        (" 1 ", "http://localhost:1"),
        (" http://127.0.0.1:5000 ", "http://127.0.0.1:5000"),
        ("not-a-port", "not-a-port"),
        (None, ""),
    ],
)
def test_coerce_local_endpoint(value, expected):
    assert coerce_local_endpoint(value) == expected


@pytest.mark.parametrize("port", [0, 65536, "70000"])
def test_port_out_of_range(port):
    with pytest.raises(ValueError):
        coerce_local_endpoint(port)


@pytest.mark.anyio
async def test_tunnels():
    assert await StaticTunnel(" https://abc123.ngrok.io ").open("http://localhost:3000") == "https://abc123.ngrok.io"

    url = await MockTunnel().open("http://localhost:3000")
    assert url.startswith("https://") and url.endswith(".ngrok.io")
    assert is_absolute_url(url)
    assert url != await MockTunnel().open("http://localhost:3000")


def _record(record_id: str, token: str) -> RegisteredService:
    return RegisteredService(
        id=record_id,
        created_at=datetime(2026, 10, 19, tzinfo=timezone.utc),
        name="My App",
        local_url="http://localhost:3000",
        type="website",
        public_url="https://abc123.ngrok.io",
        token=token,
    )


def test_token_store(tmp_path):
    store = TokenFileStore(tmp_path / "tokens.json")
    assert store.entries() == {}

    store.save(_record("a", "tok-a"))
    store.save(_record("b", "tok-b"))
    store.save(_record("a", "tok-a2"))

    assert store.token_for("a") == "tok-a2"
    assert store.token_for("b") == "tok-b"
    assert store.token_for("missing") is None
    assert store.entries()["b"]["createdAt"] == "2026-10-19T00:00:00Z"
    assert not (tmp_path / "tokens.json.tmp").exists()


@pytest.mark.parametrize("content", ["{not json", "[1, 2]", '"text"', "\udcff"])
def test_unreadable_token_file(tmp_path, content):
    path = tmp_path / "tokens.json"
    path.write_text(content, encoding="utf-8", errors="surrogateescape")
    before = path.read_bytes()
    store = TokenFileStore(path)

    with pytest.raises(TokenStoreError):
        store.save(_record("a", "tok-a"))
    with pytest.raises(TokenStoreError):
        store.token_for("a")
    assert path.read_bytes() == before
