# application/ports/session_resolver.py
from __future__ import annotations

from typing import Mapping, Optional, Protocol

from domain.session import Session


class SessionResolverPort(Protocol):
    def resolve(self, headers: Mapping[str, str]) -> Optional[Session]:
        ...
