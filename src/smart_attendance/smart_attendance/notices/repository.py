from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Notice


class NoticeRepository(Protocol):
    def get_by_id(self, notice_id: str) -> Optional[Notice]:
        raise NotImplementedError

    def list_notices(self, *, teacher_ids: Optional[Sequence[str]] = None) -> Sequence[Notice]:
        """All notices (or those of ``teacher_ids``), newest first."""

        raise NotImplementedError

    def create(self, notice: Notice) -> None:
        raise NotImplementedError

    def update(self, notice: Notice) -> bool:
        raise NotImplementedError

    def delete_by_id(self, notice_id: str) -> bool:
        raise NotImplementedError
