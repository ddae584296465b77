from __future__ import annotations

from typing import Optional, Protocol


class SettingsRepository(Protocol):
    """Key/value application settings stored in the database."""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def upsert(self, key: str, value: str) -> None:
        raise NotImplementedError
