from __future__ import annotations

import importlib

from dotenv import load_dotenv

from config import get_settings_module
from rome_timeclock.database.bootstrap import ensure_demo_workers
from rome_timeclock.database.fixtures import DEMO_WORKERS


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    if not settings.DB_CONFIG:
        raise SystemExit("DB_HOST is not set; demo mode already loads the demo workers in memory.")
    db_config = dict(settings.DB_CONFIG)

    ensure_demo_workers(db_config, pepper=settings.PIN_PEPPER)

    print(
        f"OK: Seeded {len(DEMO_WORKERS)} demo workers -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
    )
    for w in DEMO_WORKERS:
        print(f"  {w.pin}  {w.full_name} ({w.role.value})")


if __name__ == "__main__":
    main()
