# application/outcome.py
from dataclasses import dataclass
from typing import Any, Optional

from domain.exceptions import RpcError


@dataclass(frozen=True)
class CallOutcome:
    path: Optional[str]
    ok: bool
    data: Any = None
    error: Optional[RpcError] = None

    @classmethod
    def success(cls, path: str, data: Any) -> "CallOutcome":
        return cls(path=path, ok=True, data=data)

    @classmethod
    def failure(cls, path: Optional[str], error: RpcError) -> "CallOutcome":
        return cls(path=path, ok=False, error=error)
