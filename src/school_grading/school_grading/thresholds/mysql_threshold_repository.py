from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import GradeThreshold
from .repository import ThresholdRepository


class MySQLThresholdRepository(ThresholdRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def load_table(self) -> Optional[Sequence[GradeThreshold]]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT label, min_percentage
                FROM grade_thresholds
                ORDER BY position ASC
                """
            )
            rows = fetchall(cur)
            if not rows:
                return None
            return [GradeThreshold(label=r["label"], min_percentage=float(r["min_percentage"])) for r in rows]

    def save_table(self, rows: Sequence[GradeThreshold]) -> None:
        # Replace-the-table semantics: one transaction, old rows gone.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM grade_thresholds")
            cur.executemany(
                "INSERT INTO grade_thresholds(position, label, min_percentage) VALUES(%s,%s,%s)",
                [(i, r.label, float(r.min_percentage)) for i, r in enumerate(rows)],
            )
