from __future__ import annotations

from typing import FrozenSet

from ..core.enums import Role
from ..core.exceptions import AuthorizationError
from .repository import UserRepository


class HierarchyService:
    """Resolve which workers a manager or admin may act on."""

    def __init__(self, users: UserRepository):
        self._users = users

    def scope_for(self, *, user_id: int, role: Role) -> FrozenSet[int]:
        if role == Role.ADMIN:
            return frozenset(self._users.list_active_ids())
        if role == Role.MANAGER:
            return frozenset(self._users.list_direct_report_ids(int(user_id)))
        raise AuthorizationError("Only managers and admins may review attendance")

    def require_in_scope(self, *, user_id: int, role: Role, worker_id: int) -> None:
        if int(worker_id) not in self.scope_for(user_id=user_id, role=role):
            raise AuthorizationError("Worker is outside your scope")
