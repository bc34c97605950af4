# application/error_classifier.py
from __future__ import annotations

from typing import FrozenSet, Union

from domain.error_codes import RpcErrorCode

# Failures caused by the caller's request. Everything else, including codes
# added later, is treated as a server fault and gets logged.
CLIENT_ERROR_CODES: FrozenSet[RpcErrorCode] = frozenset(
    {
        RpcErrorCode.NOT_FOUND,
        RpcErrorCode.BAD_REQUEST,
        RpcErrorCode.UNAUTHORIZED,
        RpcErrorCode.FORBIDDEN,
        RpcErrorCode.PARSE_ERROR,
    }
)


def is_client_error(code: Union[RpcErrorCode, str, None]) -> bool:
    parsed = RpcErrorCode.parse(code)
    if parsed is None:
        return False
    return parsed in CLIENT_ERROR_CODES
