from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: a worker, manager or admin.

    Note: Credentials live with the authentication collaborator; this record
    only carries what attendance needs (role and reporting line).
    """

    user_id: int
    full_name: str
    email: str
    role: Role
    manager_id: Optional[int] = None
    department: Optional[str] = None
    is_active: bool = True
