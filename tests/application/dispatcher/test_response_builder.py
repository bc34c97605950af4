# tests/application/dispatcher/test_response_builder.py
from application.dispatcher.response_builder import MULTI_STATUS, RpcResponseBuilder
from application.outcome import CallOutcome
from domain.error_codes import RpcErrorCode
from domain.exceptions import RpcError


def test_build_single_success() -> None:
    builder = RpcResponseBuilder()

    response = builder.build_single(CallOutcome.success("system.health", {"status": "ok"}))

    assert response.status == 200
    assert response.body == {"result": {"data": {"status": "ok"}}}


def test_build_single_error_uses_code_tables() -> None:
    builder = RpcResponseBuilder()
    error = RpcError(RpcErrorCode.FORBIDDEN, "Organizer access required")

    response = builder.build_single(CallOutcome.failure("volunteer.list", error))

    assert response.status == 403
    assert response.body == {
        "error": {
            "message": "Organizer access required",
            "code": -32003,
            "data": {"code": "FORBIDDEN", "httpStatus": 403, "path": "volunteer.list"},
        }
    }


def test_build_error_includes_issues_when_present() -> None:
    builder = RpcResponseBuilder()
    error = RpcError(RpcErrorCode.BAD_REQUEST, "Input validation failed", issues=[{"loc": ["id"]}])

    body = builder.build_error(error, "volunteer.getById")

    assert body["error"]["data"]["issues"] == [{"loc": ["id"]}]


def test_build_batch_with_same_status() -> None:
    builder = RpcResponseBuilder()
    outcomes = [
        CallOutcome.failure("a.b", RpcError(RpcErrorCode.NOT_FOUND)),
        CallOutcome.failure("a.c", RpcError(RpcErrorCode.NOT_FOUND)),
    ]

    response = builder.build_batch(outcomes)

    assert response.status == 404
    assert len(response.body) == 2


def test_build_batch_with_mixed_status() -> None:
    builder = RpcResponseBuilder()
    outcomes = [
        CallOutcome.success("a.b", 1),
        CallOutcome.failure("a.c", RpcError(RpcErrorCode.NOT_FOUND)),
    ]

    response = builder.build_batch(outcomes)

    assert response.status == MULTI_STATUS
    assert response.body[0] == {"result": {"data": 1}}
