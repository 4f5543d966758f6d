from __future__ import annotations

from enum import Enum


class ClientType(str, Enum):
    IOS = "ios"
    ANDROID = "android"

    @classmethod
    def parse(cls, value: str | None) -> ClientType | None:
        if value is None:
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None
