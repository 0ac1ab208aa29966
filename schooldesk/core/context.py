# schooldesk/core/context.py - Per-request tenant context passed into every service
from dataclasses import dataclass, field
from typing import FrozenSet, Optional
import uuid


@dataclass(frozen=True)
class TenantContext:
    """Who is calling and which school they act for; always derived from the session"""
    school_id: uuid.UUID
    user_id: uuid.UUID
    username: str
    permissions: FrozenSet[str] = field(default_factory=frozenset)
    role_name: Optional[str] = None

    def can(self, slug: str) -> bool:
        return slug in self.permissions
