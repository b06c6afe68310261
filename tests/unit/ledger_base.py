"""Entity types imported by subclasses declared in other modules."""

from __future__ import annotations

from typing import Annotated


class Amount:
    def __init__(self, minor: int) -> None:
        self.minor = minor


class LedgerEntry:
    def __init__(self, id: int, amount: Annotated[Amount, "minor-units"]) -> None:
        self.id = id
        self.amount = amount
