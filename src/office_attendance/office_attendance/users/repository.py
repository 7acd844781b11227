from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import User


class UserRepository(Protocol):
    """Organisational-hierarchy lookups.

    Note (DIP): services depend on this interface, not on a concrete DB.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def list_direct_report_ids(self, manager_id: int) -> Sequence[int]:
        """Active users whose reporting line points at manager_id."""

        raise NotImplementedError

    def list_active_ids(self) -> Sequence[int]:
        raise NotImplementedError
