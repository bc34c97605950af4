# application/router/procedure_router.py
from __future__ import annotations

from typing import Callable, Dict, List, Optional, Type

from pydantic import BaseModel

from domain.error_codes import RpcErrorCode
from domain.exceptions import RpcError
from domain.procedure import AccessLevel, Handler, Procedure, ProcedureType, split_path

class ProcedureRouter:
    """
    Dispatch table from dotted procedure path ("volunteer.getById") to Procedure.

        volunteer = ProcedureRouter()

        @volunteer.query("getById", input=GetVolunteerById, access=AccessLevel.ADMIN)
        def get_by_id(call): ...

        root = ProcedureRouter()
        root.mount("volunteer", volunteer)
    """

    def __init__(self) -> None:
        self._procedures: Dict[str, Procedure] = {}

    def add(self, path: str, procedure: Procedure) -> None:
        split_path(path)
        if path in self._procedures:
            raise ValueError(f"Procedure already registered: {path}")
        self._procedures[path] = procedure

    def query(
        self,
        name: str,
        input: Optional[Type[BaseModel]] = None,
        access: AccessLevel = AccessLevel.PUBLIC,
    ) -> Callable[[Handler], Handler]:
        return self._register(name, ProcedureType.QUERY, input, access)

    def mutation(
        self,
        name: str,
        input: Optional[Type[BaseModel]] = None,
        access: AccessLevel = AccessLevel.PUBLIC,
    ) -> Callable[[Handler], Handler]:
        return self._register(name, ProcedureType.MUTATION, input, access)

    def mount(self, prefix: str, router: "ProcedureRouter") -> "ProcedureRouter":
        split_path(prefix)
        for path, procedure in router._procedures.items():
            self.add(f"{prefix}.{path}", procedure)
        return self

    def resolve(self, path: str, expected: Optional[ProcedureType] = None) -> Procedure:
        procedure = self._procedures.get(path)
        if procedure is None:
            kind = expected.value if expected else "any"
            raise RpcError(
                RpcErrorCode.NOT_FOUND,
                f'No "{kind}"-procedure on path "{path}"',
            )
        return procedure

    def paths(self) -> List[str]:
        return sorted(self._procedures)

    def _register(
        self,
        name: str,
        type_: ProcedureType,
        input_model: Optional[Type[BaseModel]],
        access: AccessLevel,
    ) -> Callable[[Handler], Handler]:
        def decorator(handler: Handler) -> Handler:
            self.add(
                name,
                Procedure(type=type_, handler=handler, input_model=input_model, access=access),
            )
            return handler

        return decorator
