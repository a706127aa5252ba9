from __future__ import annotations

from typing import Any, Callable

import httpx
import pytest

from adapters.http_client import ResilientClient
from adapters.randomuser_client import RandomUserClient
from core.config import ClientConfig

from tests.factories import make_payload


class RecordingSleep:
    """Sustituto de `asyncio.sleep` que sólo anota las esperas."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


class RecordingLogger:
    def __init__(self) -> None:
        self.records: list[tuple[str, str, Any]] = []

    def info(self, message: str, data: Any | None = None) -> None:
        self.records.append(("info", message, data))

    def warn(self, message: str, data: Any | None = None) -> None:
        self.records.append(("warn", message, data))

    def error(self, message: str, data: Any | None = None) -> None:
        self.records.append(("error", message, data))

    def messages(self, level: str) -> list[str]:
        return [message for lvl, message, _ in self.records if lvl == level]


class FakeAPI:
    """Transport falso: responde con una secuencia de respuestas/excepciones.

    Cada elemento de `script` es un status (int), un `httpx.Response`, una
    excepción, o un callable `request -> Response`. El último se repite.
    """

    def __init__(self, script: list[Any] | None = None) -> None:
        self.script = list(script or [200])
        self.requests: list[httpx.Request] = []

    @property
    def calls(self) -> int:
        return len(self.requests)

    def _respond(self, request: httpx.Request) -> httpx.Response:
        index = min(len(self.requests), len(self.script)) - 1
        step = self.script[index]
        if isinstance(step, BaseException):
            raise step
        if isinstance(step, httpx.Response):
            return step
        if callable(step):
            return step(request)
        if step == 200:
            return httpx.Response(200, json=_payload_for(request))
        return httpx.Response(step)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._respond(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def last_params(self) -> dict[str, str]:
        return dict(self.requests[-1].url.params)


def _payload_for(request: httpx.Request) -> dict[str, Any]:
    """Respuesta coherente con los query params recibidos."""

    params = request.url.params
    count = int(params.get("results", "1"))
    payload = make_payload(count=count, seed=params.get("seed", "abc123"), page=int(params.get("page", "1")))
    for user in payload["results"]:
        if "gender" in params:
            user["gender"] = params["gender"]
        if "nat" in params:
            user["nat"] = params["nat"]
    return payload


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Sin `.env` del proyecto ni variables RU_HARNESS_* del entorno real."""

    import os

    for key in list(os.environ):
        if key.upper().startswith("RU_HARNESS_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def recording_logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def fake_api() -> FakeAPI:
    return FakeAPI()


@pytest.fixture
def client_config() -> ClientConfig:
    return ClientConfig(
        base_url="https://randomuser.test/api",
        timeout_seconds=2.0,
        retry_attempts=3,
        retry_delay_seconds=1.0,
        enable_logging=False,
    )


@pytest.fixture
def make_client(
    client_config: ClientConfig,
    sleep: RecordingSleep,
    recording_logger: RecordingLogger,
) -> Callable[..., ResilientClient]:
    def _make(api: FakeAPI, config: ClientConfig | None = None) -> ResilientClient:
        return ResilientClient(
            config or client_config,
            logger=recording_logger,
            transport=api.transport,
            sleep=sleep,
        )

    return _make


@pytest.fixture
def randomuser(fake_api: FakeAPI, make_client: Callable[..., ResilientClient]) -> RandomUserClient:
    return RandomUserClient(make_client(fake_api))
