# infrastructure/config/env_settings.py
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import dotenv_values

from domain.exceptions import ValidationError

# .env at the project root; real environment variables take precedence over it.
_env_path = Path(__file__).parent.parent.parent / ".env"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}
_LOG_BACKENDS = {"console", "loguru", "both"}


@dataclass(frozen=True)
class RpcSettings:
    endpoint: str = "/api/trpc"
    allow_batching: bool = True
    max_batch_size: int = 10
    log_level: str = "INFO"
    log_backend: str = "console"
    service_name: str = "cndn-rpc"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "RpcSettings":
        """
        Build settings from environment variables.

        Args:
            environ: variables to read; defaults to the .env file merged with os.environ

        Raises:
            ValidationError: when a value cannot be interpreted
        """
        env = dict(environ) if environ is not None else _load_environ()
        defaults = cls()

        endpoint = env.get("RPC_ENDPOINT", defaults.endpoint).strip()
        if not endpoint.startswith("/"):
            raise ValidationError(f"RPC_ENDPOINT must start with '/': {endpoint}")

        log_backend = env.get("LOG_BACKEND", defaults.log_backend).strip().lower()
        if log_backend not in _LOG_BACKENDS:
            raise ValidationError(f"Unknown LOG_BACKEND: {log_backend}")

        max_batch_size = _parse_int(env.get("RPC_MAX_BATCH_SIZE"), defaults.max_batch_size, "RPC_MAX_BATCH_SIZE")
        if max_batch_size < 1:
            raise ValidationError("RPC_MAX_BATCH_SIZE must be >= 1")

        return cls(
            endpoint=endpoint.rstrip("/") or defaults.endpoint,
            allow_batching=_parse_bool(env.get("RPC_ALLOW_BATCHING"), defaults.allow_batching, "RPC_ALLOW_BATCHING"),
            max_batch_size=max_batch_size,
            log_level=env.get("LOG_LEVEL", defaults.log_level).strip().upper(),
            log_backend=log_backend,
            service_name=env.get("SERVICE_NAME", defaults.service_name).strip(),
        )


def _load_environ() -> dict:
    values = {}
    if _env_path.exists():
        values.update({k: v for k, v in dotenv_values(_env_path).items() if v is not None})
    values.update(os.environ)
    return values


def _parse_bool(raw: Optional[str], default: bool, name: str) -> bool:
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValidationError(f"{name} must be a boolean: {raw}")


def _parse_int(raw: Optional[str], default: int, name: str) -> int:
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw.strip())
    except ValueError:
        raise ValidationError(f"{name} must be an integer: {raw}") from None
