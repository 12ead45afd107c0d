import logging
import os

QUIET_LOGGERS = ("urllib3", "requests", "sqlalchemy.engine", "watchdog")


def configure_logging(level_name=None):
    level_name = (level_name or os.getenv("PLANNER_LOG_LEVEL") or "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
    return level
