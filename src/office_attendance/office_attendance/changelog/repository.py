from __future__ import annotations

from typing import Optional, Protocol

from ..core.enums import ChangelogType


class ChangelogRepository(Protocol):
    def create(self, *, title: str, description: str, type: ChangelogType, created_by: Optional[int]) -> int:
        raise NotImplementedError
