"""Store the default grade table if the database has none yet."""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.school_grading.school_grading.database.connection import DBConfig, DatabaseConnection
from src.school_grading.school_grading.thresholds.manager import default_table
from src.school_grading.school_grading.thresholds.mysql_threshold_repository import MySQLThresholdRepository


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    repo = MySQLThresholdRepository(DatabaseConnection(DBConfig.from_dict(db_config)))
    if repo.load_table():
        print("OK: grade table already present, nothing to do")
        return

    repo.save_table(default_table())
    print(
        "OK: Seeded default grade table -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
    )


if __name__ == "__main__":
    main()
