# infrastructure/sessions/dict_session_resolver.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

from domain.session import Session

_BEARER = "bearer "


@dataclass(frozen=True)
class DictSessionResolver:
    """Resolves `Authorization: Bearer <token>` against a fixed token table."""
    sessions: Dict[str, Session] = field(default_factory=dict)

    def resolve(self, headers: Mapping[str, str]) -> Optional[Session]:
        authorization = _header(headers, "authorization")
        if not authorization or not authorization.lower().startswith(_BEARER):
            return None
        token = authorization[len(_BEARER):].strip()
        return self.sessions.get(token)


def _header(headers: Mapping[str, str], name: str) -> Optional[str]:
    for key, value in headers.items():
        if key.lower() == name:
            return value
    return None
