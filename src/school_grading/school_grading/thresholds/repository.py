from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import GradeThreshold


class ThresholdRepository(Protocol):
    def load_table(self) -> Optional[Sequence[GradeThreshold]]:
        """Return the stored table (highest grade first), or None if nothing is stored."""

        raise NotImplementedError

    def save_table(self, rows: Sequence[GradeThreshold]) -> None:
        """Replace the stored table wholesale."""

        raise NotImplementedError
