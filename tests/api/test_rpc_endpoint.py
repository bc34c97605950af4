from __future__ import annotations

import json
import sys

from fastapi.testclient import TestClient
from loguru import logger as loguru_logger

from api import main
from application.router.procedure_router import ProcedureRouter
from domain.error_codes import RpcErrorCode
from domain.exceptions import RpcError
from domain.session import Session
from infrastructure.config.env_settings import RpcSettings
from infrastructure.logging.composite_logger import CompositeLogger
from infrastructure.logging.console_logger import ConsoleLogger
from infrastructure.logging.loguru_logger import LoguruLogger
from infrastructure.sessions.dict_session_resolver import DictSessionResolver


class FakeLogger:
    def __init__(self, bound: dict[str, object] | None = None, events: list[dict[str, object]] | None = None) -> None:
        self.bound = bound or {}
        self.events = [] if events is None else events

    def bind(self, **fields: object) -> "FakeLogger":
        merged = dict(self.bound)
        merged.update(fields)
        return FakeLogger(bound=merged, events=self.events)

    def info(self, event: str, **fields: object) -> None:
        payload = dict(self.bound)
        payload.update(fields)
        payload["type"] = event
        self.events.append(payload)

    def debug(self, event: str, **fields: object) -> None:
        pass

    def warning(self, event: str, **fields: object) -> None:
        self.info(event, **fields)

    def error(self, event: str, **fields: object) -> None:
        self.info(event, **fields)


def _speaker_router() -> ProcedureRouter:
    speaker = ProcedureRouter()

    @speaker.query("getById")
    def get_by_id(call):
        raise RpcError(RpcErrorCode.NOT_FOUND, "Speaker not found")

    @speaker.query("list")
    def list_speakers(call):
        raise RuntimeError("content store query failed")

    @speaker.query("featured")
    def featured(call):
        return [{"name": "Ada"}]

    return ProcedureRouter().mount("speaker", speaker)


def _client(logger: FakeLogger, **settings) -> TestClient:
    app = main.create_app(
        settings=RpcSettings(**settings),
        router=_speaker_router(),
        logger=logger,
    )
    return TestClient(app)


def test_not_found_returns_404_without_log() -> None:
    # Arrange
    logger = FakeLogger()
    client = _client(logger)

    # Act
    response = client.get("/api/trpc/speaker.getById", params={"input": json.dumps({"id": "x"})})

    # Assert
    assert response.status_code == 404
    body = response.json()
    assert body["error"]["data"]["code"] == "NOT_FOUND"
    assert body["error"]["message"] == "Speaker not found"
    assert logger.events == []


def test_internal_error_returns_500_and_logs_path_once() -> None:
    # Arrange
    logger = FakeLogger()
    client = _client(logger)

    # Act
    response = client.get("/api/trpc/speaker.list")

    # Assert
    assert response.status_code == 500
    assert response.json()["error"]["data"]["code"] == "INTERNAL_SERVER_ERROR"
    assert len(logger.events) == 1
    assert logger.events[0]["type"] == "rpc.procedure_failed"
    assert logger.events[0]["path"] == "speaker.list"
    assert "content store query failed" in logger.events[0]["message"]


def test_query_success() -> None:
    client = _client(FakeLogger())

    response = client.get("/api/trpc/speaker.featured")

    assert response.status_code == 200
    assert response.json() == {"result": {"data": [{"name": "Ada"}]}}


def test_post_to_query_is_method_not_supported() -> None:
    logger = FakeLogger()
    client = _client(logger)

    response = client.post("/api/trpc/speaker.featured", json={})

    assert response.status_code == 405
    assert response.json()["error"]["data"]["code"] == "METHOD_NOT_SUPPORTED"
    assert len(logger.events) == 1


def test_other_http_methods_are_rejected_by_the_route() -> None:
    client = _client(FakeLogger())

    assert client.put("/api/trpc/speaker.featured").status_code == 405


def test_batch_query() -> None:
    client = _client(FakeLogger())

    response = client.get("/api/trpc/speaker.featured,speaker.getById", params={"batch": "1"})

    assert response.status_code == 207
    body = response.json()
    assert body[0]["result"]["data"] == [{"name": "Ada"}]
    assert body[1]["error"]["data"]["code"] == "NOT_FOUND"


def test_custom_endpoint_prefix() -> None:
    client = _client(FakeLogger(), endpoint="/rpc")

    assert client.get("/rpc/speaker.featured").status_code == 200
    assert client.get("/api/trpc/speaker.featured").status_code == 404


def test_default_app_serves_system_procedures() -> None:
    # Arrange
    resolver = DictSessionResolver({"tok": Session(speaker_id="sp-1", name="Ada", is_organizer=True)})
    app = main.create_app(settings=RpcSettings(), logger=FakeLogger(), session_resolver=resolver)
    client = TestClient(app)

    # Act
    health = client.get("/api/trpc/system.health")
    whoami = client.get("/api/trpc/system.whoami", headers={"Authorization": "Bearer tok"})
    anonymous = client.get("/api/trpc/system.whoami")
    echo = client.post("/api/trpc/system.echo", json={"message": "hei"})

    # Assert
    assert health.json() == {"result": {"data": {"status": "ok", "service": "cndn-rpc"}}}
    assert whoami.json()["result"]["data"]["speaker_id"] == "sp-1"
    assert anonymous.status_code == 401
    assert echo.json() == {"result": {"data": {"message": "hei"}}}


def test_root_health_check() -> None:
    client = TestClient(main.app)

    response = client.get("/")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_log_backend_selection() -> None:
    console = main._build_logger(RpcSettings(log_backend="console", service_name="svc"))
    loguru = main._build_logger(RpcSettings(log_backend="loguru"))
    both = main._build_logger(RpcSettings(log_backend="both"))

    assert isinstance(console, ConsoleLogger)
    assert console.bound == {"service": "svc"}
    assert isinstance(loguru, LoguruLogger)
    assert isinstance(both, CompositeLogger)
    assert [type(inner) for inner in both.loggers] == [ConsoleLogger, LoguruLogger]


def test_non_utf8_body_is_parse_error() -> None:
    logger = FakeLogger()
    app = main.create_app(settings=RpcSettings(), logger=logger)
    client = TestClient(app)

    response = client.post(
        "/api/trpc/system.echo",
        content=b'{"message": "\xff\xfe"}',
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["error"]["data"]["code"] == "PARSE_ERROR"
    assert logger.events == []


def test_create_app_applies_log_level_to_loguru(capsys) -> None:
    main.create_app(settings=RpcSettings(log_level="ERROR"), logger=FakeLogger())

    try:
        loguru_logger.warning("hidden.warning")
        loguru_logger.error("shown.error")
        err = capsys.readouterr().err
    finally:
        loguru_logger.remove()
        loguru_logger.add(sys.stderr)

    assert "hidden.warning" not in err
    assert "shown.error" in err
