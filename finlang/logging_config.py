import logging
import logging.config
import os
from pathlib import Path

ROOT_LOGGER = "finlang"


def setup_logging(
    log_level: str | None = None,
    log_file: str | Path | None = None,
    enable_console: bool = True,
) -> None:
    """
    Configure the ``finlang`` logger hierarchy.

    Args:
        log_level: Logging level name; defaults to ``FINLANG_LOG_LEVEL`` or INFO.
        log_file: Optional path of a log file, its directory is created.
        enable_console: Whether to log to stdout.
    """
    log_level = (log_level or os.getenv("FINLANG_LOG_LEVEL", "INFO")).upper()

    config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "detailed": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "simple": {"format": "%(levelname)s - %(name)s - %(message)s"},
        },
        "handlers": {},
        "loggers": {
            ROOT_LOGGER: {"level": log_level, "handlers": [], "propagate": False},
        },
    }

    if enable_console:
        config["handlers"]["console"] = {
            "class": "logging.StreamHandler",
            "level": log_level,
            "formatter": "simple",
            "stream": "ext://sys.stdout",
        }
        config["loggers"][ROOT_LOGGER]["handlers"].append("console")

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        config["handlers"]["file"] = {
            "class": "logging.FileHandler",
            "level": "DEBUG",
            "formatter": "detailed",
            "filename": str(log_file),
            "encoding": "utf8",
        }
        config["loggers"][ROOT_LOGGER]["handlers"].append("file")

    logging.config.dictConfig(config)


def get_logger(name: str) -> logging.Logger:
    if name == ROOT_LOGGER or name.startswith(ROOT_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
