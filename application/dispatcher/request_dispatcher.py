# application/dispatcher/request_dispatcher.py
from __future__ import annotations

import asyncio
import json
import time
from typing import Any, List, Optional, Union

from fastapi.encoders import jsonable_encoder
from loguru import logger as process_logger

from application.dispatcher.response_builder import RpcResponseBuilder
from application.dispatcher.rpc_request import RpcRequest, RpcResponse
from application.error_classifier import is_client_error
from application.outcome import CallOutcome
from application.ports.logger import LoggerPort
from application.ports.session_resolver import SessionResolverPort
from application.router.procedure_router import ProcedureRouter
from application.services.procedure_invoker import ProcedureInvoker
from domain.error_codes import RpcErrorCode
from domain.exceptions import RpcError
from domain.procedure import ProcedureType
from domain.session import RpcContext

NO_PATH = "<no-path>"


class RequestDispatcher:
    """
    Entry point for every RPC request.

    Each call is routed, invoked and turned into an envelope. Failures go
    through the error classifier: caller mistakes stay out of the log, anything
    else is logged once with its path. The response is the same either way.
    """

    def __init__(
        self,
        router: ProcedureRouter,
        logger: LoggerPort,
        session_resolver: Optional[SessionResolverPort] = None,
        invoker: Optional[ProcedureInvoker] = None,
        response_builder: Optional[RpcResponseBuilder] = None,
        allow_batching: bool = True,
        max_batch_size: int = 10,
    ) -> None:
        self._router = router
        self._logger = logger
        self._session_resolver = session_resolver
        self._invoker = invoker or ProcedureInvoker()
        self._builder = response_builder or RpcResponseBuilder()
        self._allow_batching = allow_batching
        self._max_batch_size = max_batch_size

    async def dispatch(self, request: RpcRequest) -> RpcResponse:
        try:
            return await self._dispatch(request)
        except Exception as exc:
            # e.g. a session resolver blowing up before any call was routed
            return self._fail_request(RpcError.from_unknown(exc))

    async def _dispatch(self, request: RpcRequest) -> RpcResponse:
        ctx = self._build_context(request)

        if request.is_batch:
            paths = request.paths()
            try:
                inputs = self._decode_batch_input(request.raw_input, len(paths))
            except RpcError as exc:
                return self._fail_request(exc)
            outcomes = await asyncio.gather(
                *(self._call(path, request.method, raw, ctx) for path, raw in zip(paths, inputs))
            )
            return self._builder.build_batch(list(outcomes))

        try:
            raw_input = self._decode_json(request.raw_input)
        except RpcError as exc:
            self.on_error(request.path, exc)
            return self._builder.build_single(CallOutcome.failure(request.path, exc))

        outcome = await self._call(request.path, request.method, raw_input, ctx)
        return self._builder.build_single(outcome)

    async def _call(self, path: str, method: str, raw_input: Any, ctx: RpcContext) -> CallOutcome:
        t0 = time.perf_counter()
        try:
            procedure = self._router.resolve(path, _expected_type(method))
            data = await self._invoker.invoke(procedure, path, method, raw_input, ctx)
            outcome = CallOutcome.success(path, _encode_result(data))
        except Exception as exc:
            error = RpcError.from_unknown(exc)
            self.on_error(path, error)
            return CallOutcome.failure(path, error)

        self._safe_log(
            "debug",
            "rpc.procedure_succeeded",
            path=path,
            elapsed_ms=int((time.perf_counter() - t0) * 1000),
        )
        return outcome

    def on_error(self, path: Optional[str], error: RpcError) -> None:
        if is_client_error(error.code):
            return
        self._safe_log(
            "error",
            "rpc.procedure_failed",
            path=path or NO_PATH,
            code=error.code.value,
            message=error.message,
            cause=repr(error.cause) if error.cause is not None else None,
        )

    def _fail_request(self, error: RpcError) -> RpcResponse:
        self.on_error(None, error)
        return self._builder.build_single(CallOutcome.failure(None, error))

    def _build_context(self, request: RpcRequest) -> RpcContext:
        session = None
        if self._session_resolver is not None:
            session = self._session_resolver.resolve(request.headers)
        return RpcContext(session=session, headers=dict(request.headers))

    def _decode_batch_input(self, raw_input: Union[str, bytes, None], count: int) -> List[Any]:
        if not self._allow_batching:
            raise RpcError(RpcErrorCode.BAD_REQUEST, "Batching is not enabled on this endpoint")
        if count > self._max_batch_size:
            raise RpcError(
                RpcErrorCode.BAD_REQUEST,
                f"Batch size {count} exceeds the limit of {self._max_batch_size}",
            )

        decoded = self._decode_json(raw_input)
        if decoded is None:
            return [None] * count
        if not isinstance(decoded, dict):
            raise RpcError(RpcErrorCode.BAD_REQUEST, '"input" needs to be an object when doing a batch call')
        return [decoded.get(str(index)) for index in range(count)]

    def _decode_json(self, raw_input: Union[str, bytes, None]) -> Any:
        if not raw_input:
            return None
        try:
            return json.loads(raw_input)
        except ValueError as exc:  # includes UnicodeDecodeError for non UTF-8 bodies
            raise RpcError(RpcErrorCode.PARSE_ERROR, "Unable to parse request input", cause=exc) from exc

    def _safe_log(self, level: str, event: str, **fields: Any) -> None:
        try:
            getattr(self._logger, level)(event, **fields)
        except Exception:
            # Never let the logger fail the response; leave a trace on the process sink instead.
            process_logger.opt(exception=True).warning("rpc logger failed while emitting {}", event)


def _expected_type(method: str) -> ProcedureType:
    return ProcedureType.MUTATION if method.upper() == "POST" else ProcedureType.QUERY


def _encode_result(data: Any) -> Any:
    encoded = jsonable_encoder(data)
    try:
        json.dumps(encoded, allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise RpcError(
            RpcErrorCode.INTERNAL_SERVER_ERROR,
            "Procedure result is not JSON serializable",
            cause=exc,
        ) from exc
    return encoded
