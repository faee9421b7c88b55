from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class StudentStats:
    total: int
    present: int
    absent: int
    percentage: float

    @classmethod
    def empty(cls) -> "StudentStats":
        return cls(total=0, present=0, absent=0, percentage=0)
