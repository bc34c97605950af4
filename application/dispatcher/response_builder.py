# application/dispatcher/response_builder.py
from __future__ import annotations

from typing import Any, Dict, List, Optional

from application.dispatcher.rpc_request import RpcResponse
from application.outcome import CallOutcome
from domain.exceptions import RpcError

MULTI_STATUS = 207


class RpcResponseBuilder:
    def build_single(self, outcome: CallOutcome) -> RpcResponse:
        return RpcResponse(status=self._status_of(outcome), body=self.build_item(outcome))

    def build_batch(self, outcomes: List[CallOutcome]) -> RpcResponse:
        statuses = {self._status_of(o) for o in outcomes}
        status = statuses.pop() if len(statuses) == 1 else MULTI_STATUS
        return RpcResponse(status=status, body=[self.build_item(o) for o in outcomes])

    def build_item(self, outcome: CallOutcome) -> Dict[str, Any]:
        if outcome.ok:
            return {"result": {"data": outcome.data}}
        return self.build_error(outcome.error, outcome.path)

    def build_error(self, error: RpcError, path: Optional[str]) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "code": error.code.value,
            "httpStatus": error.code.http_status,
            "path": path,
        }
        if error.issues is not None:
            data["issues"] = error.issues
        return {
            "error": {
                "message": error.message,
                "code": error.code.json_rpc_code,
                "data": data,
            }
        }

    def _status_of(self, outcome: CallOutcome) -> int:
        if outcome.ok:
            return 200
        return outcome.error.code.http_status
