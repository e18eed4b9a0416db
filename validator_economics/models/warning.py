"""Recoverable problems collected during a run and attached to its report."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class WarningKind(Enum):
    """Categories of recovered failures"""

    BULK_SOURCE_FAILURE = "bulk source failure"
    SOURCE_FETCH_ERROR = "source fetch error"
    MALFORMED_RECORD = "malformed record"
    CANCELLED = "cancelled"
    DIVISION_GUARD = "division guard"


@dataclass(frozen=True)
class ReportWarning:
    """A recovered failure, optionally tied to a single epoch"""

    kind: WarningKind
    message: str
    epoch: int | None = None

    def sort_key(self) -> tuple[int, int]:
        """Range level warnings first, then ascending by epoch"""
        if self.epoch is None:
            return (0, 0)
        return (1, self.epoch)

    def __str__(self) -> str:
        if self.epoch is None:
            return f"[{self.kind.value}] {self.message}"
        return f"[{self.kind.value}] epoch {self.epoch}: {self.message}"
