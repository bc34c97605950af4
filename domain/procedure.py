# domain/procedure.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, List, Optional, Type, Union

from pydantic import BaseModel

from domain.exceptions import ValidationError
from domain.session import RpcContext


class ProcedureType(str, Enum):
    QUERY = "query"
    MUTATION = "mutation"

    @property
    def http_method(self) -> str:
        return "GET" if self is ProcedureType.QUERY else "POST"


class AccessLevel(str, Enum):
    PUBLIC = "public"
    PROTECTED = "protected"
    ADMIN = "admin"


@dataclass(frozen=True)
class ProcedureCall:
    path: str
    input: Any
    ctx: RpcContext


Handler = Callable[[ProcedureCall], Union[Any, Awaitable[Any]]]


@dataclass(frozen=True)
class Procedure:
    type: ProcedureType
    handler: Handler
    input_model: Optional[Type[BaseModel]] = None
    access: AccessLevel = AccessLevel.PUBLIC


def split_path(path: str) -> List[str]:
    segments = path.split(".")
    if not path or any(not s.strip() for s in segments):
        raise ValidationError(f"Invalid procedure path: {path!r}")
    return segments
