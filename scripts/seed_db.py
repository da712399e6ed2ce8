from __future__ import annotations

import argparse
import importlib
import logging

from dotenv import load_dotenv

from college_attendance.common.logging_setup import configure_logging
from college_attendance.config import get_settings_module
from college_attendance.container import build_container
from college_attendance.database.bootstrap import ensure_demo_admin

logger = logging.getLogger("seed_db")


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed the demo admin and the default bell schedule.")
    parser.add_argument("--login", default="admin")
    parser.add_argument("--password", default="admin123")
    args = parser.parse_args()

    load_dotenv(override=False)
    configure_logging("INFO")
    settings = importlib.import_module(get_settings_module())

    ensure_demo_admin(dict(settings.DB_CONFIG), login=args.login, password=args.password)
    slots = build_container(settings).bell_schedule_service.seed_defaults()
    logger.info("seeded admin %r and %s bell slots", args.login, slots)


if __name__ == "__main__":
    main()
