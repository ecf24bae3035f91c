"""Delete attendance records past the retention window.

Queries already hide expired records; run this from cron to reclaim the rows.
"""

from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for path in (REPO_ROOT, REPO_ROOT / "src"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from config import get_settings_module

from swipe_attendance.container import build_container
from swipe_attendance.main import configure_logging


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    container = build_container(
        db_config=dict(settings.DB_CONFIG),
        retention_days=int(getattr(settings, "HISTORY_RETENTION_DAYS", 30)),
    )
    removed = container.history_service.purge_expired()
    logging.getLogger("purge_history").info("Done, %d record(s) removed", removed)


if __name__ == "__main__":
    main()
