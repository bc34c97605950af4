# domain/error_codes.py
from __future__ import annotations

from enum import Enum
from typing import Dict, Optional, Union


class RpcErrorCode(str, Enum):
    PARSE_ERROR = "PARSE_ERROR"
    BAD_REQUEST = "BAD_REQUEST"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"
    NOT_IMPLEMENTED = "NOT_IMPLEMENTED"
    BAD_GATEWAY = "BAD_GATEWAY"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    GATEWAY_TIMEOUT = "GATEWAY_TIMEOUT"
    UNAUTHORIZED = "UNAUTHORIZED"
    PAYMENT_REQUIRED = "PAYMENT_REQUIRED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    METHOD_NOT_SUPPORTED = "METHOD_NOT_SUPPORTED"
    TIMEOUT = "TIMEOUT"
    CONFLICT = "CONFLICT"
    PRECONDITION_FAILED = "PRECONDITION_FAILED"
    PAYLOAD_TOO_LARGE = "PAYLOAD_TOO_LARGE"
    UNSUPPORTED_MEDIA_TYPE = "UNSUPPORTED_MEDIA_TYPE"
    UNPROCESSABLE_CONTENT = "UNPROCESSABLE_CONTENT"
    TOO_MANY_REQUESTS = "TOO_MANY_REQUESTS"
    CLIENT_CLOSED_REQUEST = "CLIENT_CLOSED_REQUEST"

    @property
    def http_status(self) -> int:
        return _HTTP_STATUS[self]

    @property
    def json_rpc_code(self) -> int:
        return _JSON_RPC_CODE[self]

    @classmethod
    def parse(cls, value: Union["RpcErrorCode", str, None]) -> Optional["RpcErrorCode"]:
        """
        Look up a code by name. Unrecognized values return None instead of raising,
        so callers can decide on their own default.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value)
        except ValueError:
            return None


_HTTP_STATUS: Dict[RpcErrorCode, int] = {
    RpcErrorCode.PARSE_ERROR: 400,
    RpcErrorCode.BAD_REQUEST: 400,
    RpcErrorCode.INTERNAL_SERVER_ERROR: 500,
    RpcErrorCode.NOT_IMPLEMENTED: 501,
    RpcErrorCode.BAD_GATEWAY: 502,
    RpcErrorCode.SERVICE_UNAVAILABLE: 503,
    RpcErrorCode.GATEWAY_TIMEOUT: 504,
    RpcErrorCode.UNAUTHORIZED: 401,
    RpcErrorCode.PAYMENT_REQUIRED: 402,
    RpcErrorCode.FORBIDDEN: 403,
    RpcErrorCode.NOT_FOUND: 404,
    RpcErrorCode.METHOD_NOT_SUPPORTED: 405,
    RpcErrorCode.TIMEOUT: 408,
    RpcErrorCode.CONFLICT: 409,
    RpcErrorCode.PRECONDITION_FAILED: 412,
    RpcErrorCode.PAYLOAD_TOO_LARGE: 413,
    RpcErrorCode.UNSUPPORTED_MEDIA_TYPE: 415,
    RpcErrorCode.UNPROCESSABLE_CONTENT: 422,
    RpcErrorCode.TOO_MANY_REQUESTS: 429,
    RpcErrorCode.CLIENT_CLOSED_REQUEST: 499,
}

# JSON-RPC 2.0 numbering; server-side faults share -32603.
_JSON_RPC_CODE: Dict[RpcErrorCode, int] = {
    RpcErrorCode.PARSE_ERROR: -32700,
    RpcErrorCode.BAD_REQUEST: -32600,
    RpcErrorCode.INTERNAL_SERVER_ERROR: -32603,
    RpcErrorCode.NOT_IMPLEMENTED: -32603,
    RpcErrorCode.BAD_GATEWAY: -32603,
    RpcErrorCode.SERVICE_UNAVAILABLE: -32603,
    RpcErrorCode.GATEWAY_TIMEOUT: -32603,
    RpcErrorCode.UNAUTHORIZED: -32001,
    RpcErrorCode.PAYMENT_REQUIRED: -32002,
    RpcErrorCode.FORBIDDEN: -32003,
    RpcErrorCode.NOT_FOUND: -32004,
    RpcErrorCode.METHOD_NOT_SUPPORTED: -32005,
    RpcErrorCode.TIMEOUT: -32008,
    RpcErrorCode.CONFLICT: -32009,
    RpcErrorCode.PRECONDITION_FAILED: -32012,
    RpcErrorCode.PAYLOAD_TOO_LARGE: -32013,
    RpcErrorCode.UNSUPPORTED_MEDIA_TYPE: -32015,
    RpcErrorCode.UNPROCESSABLE_CONTENT: -32022,
    RpcErrorCode.TOO_MANY_REQUESTS: -32029,
    RpcErrorCode.CLIENT_CLOSED_REQUEST: -32099,
}
