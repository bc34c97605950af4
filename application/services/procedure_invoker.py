# application/services/procedure_invoker.py
from __future__ import annotations

import inspect
import json
from typing import Any

import pydantic
from fastapi.concurrency import run_in_threadpool

from domain.error_codes import RpcErrorCode
from domain.exceptions import RpcError
from domain.procedure import AccessLevel, Procedure, ProcedureCall
from domain.session import RpcContext


class ProcedureInvoker:
    """
    Runs a single resolved procedure: method check, access check, input
    validation, then the handler. Whatever goes wrong leaves as an RpcError.
    """

    async def invoke(
        self,
        procedure: Procedure,
        path: str,
        method: str,
        raw_input: Any,
        ctx: RpcContext,
    ) -> Any:
        self._check_method(procedure, path, method)
        self._check_access(procedure, ctx)
        parsed = self._parse_input(procedure, raw_input)

        call = ProcedureCall(path=path, input=parsed, ctx=ctx)
        try:
            if inspect.iscoroutinefunction(procedure.handler):
                result = await procedure.handler(call)
            else:
                # def handlers run on the worker threadpool
                result = await run_in_threadpool(procedure.handler, call)
                if inspect.isawaitable(result):
                    result = await result
        except Exception as exc:
            raise RpcError.from_unknown(exc) from exc
        return result

    def _check_method(self, procedure: Procedure, path: str, method: str) -> None:
        expected = procedure.type.http_method
        if method.upper() != expected:
            raise RpcError(
                RpcErrorCode.METHOD_NOT_SUPPORTED,
                f'Unsupported {method.upper()}-request to {procedure.type.value} procedure at path "{path}"',
            )

    def _check_access(self, procedure: Procedure, ctx: RpcContext) -> None:
        if procedure.access is AccessLevel.PUBLIC:
            return
        if not ctx.is_authenticated:
            raise RpcError(RpcErrorCode.UNAUTHORIZED, "Authentication required")
        if procedure.access is AccessLevel.ADMIN and not ctx.session.is_organizer:
            raise RpcError(RpcErrorCode.FORBIDDEN, "Organizer access required")

    def _parse_input(self, procedure: Procedure, raw_input: Any) -> Any:
        if procedure.input_model is None:
            return raw_input
        try:
            return procedure.input_model.model_validate(raw_input)
        except pydantic.ValidationError as exc:
            issues = json.loads(exc.json(include_url=False))
            raise RpcError(
                RpcErrorCode.BAD_REQUEST,
                "Input validation failed",
                cause=exc,
                issues=issues,
            ) from exc
