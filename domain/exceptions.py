# domain/exceptions.py
from __future__ import annotations

from typing import Any, Dict, List, Optional

from domain.error_codes import RpcErrorCode


class ValidationError(Exception):
    """Raised by value objects and settings for malformed values."""


class RpcError(Exception):
    """
    A failed procedure call. The code decides both the HTTP status returned to
    the caller and whether the failure is worth logging.
    """

    def __init__(
        self,
        code: RpcErrorCode,
        message: Optional[str] = None,
        cause: Optional[BaseException] = None,
        issues: Optional[List[Dict[str, Any]]] = None,
    ) -> None:
        super().__init__(message or code.value)
        self.code = code
        self.message = message or code.value
        self.cause = cause
        self.issues = issues

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"RpcError(code={self.code.value!r}, message={self.message!r})"

    @classmethod
    def from_unknown(cls, exc: BaseException) -> "RpcError":
        if isinstance(exc, RpcError):
            return exc
        return cls(
            RpcErrorCode.INTERNAL_SERVER_ERROR,
            message=str(exc) or type(exc).__name__,
            cause=exc,
        )
