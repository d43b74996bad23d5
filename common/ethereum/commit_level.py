from __future__ import annotations

from strenum import StrEnum
from typing_extensions import Self


class EthCommit(StrEnum):
    """Block tags accepted instead of a block number."""

    Pending = "pending"
    Latest = "latest"
    Safe = "safe"
    Finalized = "finalized"
    Earliest = "earliest"

    @classmethod
    def from_raw(cls, tag: str) -> Self:
        try:
            return cls(tag.lower())
        except (AttributeError, ValueError) as exc:
            raise ValueError(f"Wrong block tag {tag}") from exc

    @classmethod
    def is_tag(cls, value: str) -> bool:
        try:
            cls.from_raw(value)
            return True
        except ValueError:
            return False
