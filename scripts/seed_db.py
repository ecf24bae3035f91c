from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for path in (REPO_ROOT, REPO_ROOT / "src"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from config import get_settings_module

from swipe_attendance.database.bootstrap import DEMO_TEACHER, ensure_demo_data
from swipe_attendance.database.connection import DBConfig


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    teacher_id = ensure_demo_data(db_config)
    print(
        f"OK: Seeded {DBConfig.from_dict(db_config).describe()} "
        f"(teacher_id={teacher_id}, login={DEMO_TEACHER['email']} / {DEMO_TEACHER['password']})"
    )


if __name__ == "__main__":
    main()
