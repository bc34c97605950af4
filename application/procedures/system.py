# application/procedures/system.py
from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict

from pydantic import BaseModel, Field

from application.router.procedure_router import ProcedureRouter
from domain.procedure import AccessLevel, ProcedureCall


class EchoInput(BaseModel):
    message: str = Field(min_length=1, description="Text sent back to the caller")


def build_system_router(service_name: str) -> ProcedureRouter:
    router = ProcedureRouter()

    @router.query("health")
    def health(call: ProcedureCall) -> Dict[str, Any]:
        return {"status": "ok", "service": service_name}

    @router.query("whoami", access=AccessLevel.PROTECTED)
    def whoami(call: ProcedureCall) -> Dict[str, Any]:
        return asdict(call.ctx.session)

    @router.mutation("echo", input=EchoInput)
    def echo(call: ProcedureCall) -> Dict[str, Any]:
        return {"message": call.input.message}

    return router
