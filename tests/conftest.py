"""Shared pytest fixtures for Image Relay tests."""

from __future__ import annotations

import json
import shutil
import tempfile
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient

from imagerelay.api.main import create_app
from imagerelay.core.config import RelayConfig
from imagerelay.core.provider import ReplicateClient

INDEX_HTML = "<!DOCTYPE html><html><body><h1>Image Relay</h1></body></html>"

# Environment variables RelayConfig reads; cleared so the host environment
# cannot leak into tests.
CONFIG_ENV_VARS = (
    "HOST",
    "PORT",
    "CORS_ORIGINS",
    "LOG_LEVEL",
    "REPLICATE_API_TOKEN",
    "PROVIDER_URL",
    "PROVIDER_TIMEOUT",
    "PUBLIC_DIR",
)


class ProviderStub:
    """Records provider requests and answers them with a canned response.

    Used as the handler of an :class:`httpx.MockTransport`.  ``requests``
    holds every request received, so tests can assert on headers and body or
    check that the provider was never called.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._respond: Callable[[], httpx.Response] = lambda: httpx.Response(200, json={})
        self.error: Exception | None = None

    def respond_json(self, body: Any, status_code: int = 200) -> None:
        self._respond = lambda: httpx.Response(status_code, json=body)

    def respond_text(self, text: str, status_code: int, content_type: str = "text/html") -> None:
        self._respond = lambda: httpx.Response(
            status_code,
            content=text.encode("utf-8"),
            headers={"content-type": content_type},
        )

    def fail_with(self, error: Exception) -> None:
        self.error = error

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self._respond()

    @property
    def last_json(self) -> Any:
        return json.loads(self.requests[-1].content)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove relay configuration variables from the environment."""
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to temporary directory

    Cleanup:
        Directory is removed after test completes
    """
    temp_path = Path(tempfile.mkdtemp())
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def public_dir(temp_dir: Path) -> Path:
    """Create a public directory with an entry page and a few assets."""
    public = temp_dir / "public"
    (public / "js").mkdir(parents=True)
    (public / "css").mkdir()
    (public / "index.html").write_text(INDEX_HTML, encoding="utf-8")
    (public / "js" / "app.js").write_text("console.log('relay');\n", encoding="utf-8")
    (public / "css" / "app.css").write_text("body { margin: 0; }\n", encoding="utf-8")
    return public


@pytest.fixture
def test_config(public_dir: Path) -> RelayConfig:
    """Create a configured RelayConfig pointing at the temporary public dir."""
    return RelayConfig(
        _env_file=None,
        replicate_api_token="r8_test_token_123",
        public_dir=public_dir,
        port=3000,
    )


@pytest.fixture
def provider_stub() -> ProviderStub:
    """Simulated Replicate endpoint."""
    return ProviderStub()


@pytest.fixture
def make_client(
    provider_stub: ProviderStub,
) -> Generator[Callable[[RelayConfig], TestClient], None, None]:
    """Factory building a TestClient for a given config, backed by the stub.

    The client is entered so that the application lifespan runs.
    """
    clients: list[TestClient] = []

    def _make(config: RelayConfig) -> TestClient:
        provider = ReplicateClient(config, transport=httpx.MockTransport(provider_stub))
        client = TestClient(create_app(config, provider=provider))
        client.__enter__()
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def test_client(make_client, test_config: RelayConfig) -> TestClient:
    """TestClient for a fully configured application."""
    return make_client(test_config)
