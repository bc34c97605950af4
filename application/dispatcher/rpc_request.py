# application/dispatcher/rpc_request.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union


@dataclass(frozen=True)
class RpcRequest:
    method: str
    path: str
    raw_input: Union[str, bytes, None] = None
    is_batch: bool = False
    headers: Dict[str, str] = field(default_factory=dict)

    def paths(self) -> List[str]:
        if not self.is_batch:
            return [self.path]
        return self.path.split(",")


@dataclass(frozen=True)
class RpcResponse:
    status: int
    body: Any
