# domain/session.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional


@dataclass(frozen=True)
class Session:
    speaker_id: str
    name: str
    is_organizer: bool = False


@dataclass(frozen=True)
class RpcContext:
    """Per-request context handed to every procedure of that request."""
    session: Optional[Session] = None
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def is_authenticated(self) -> bool:
        return self.session is not None
