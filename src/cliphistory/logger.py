import logging
from logging import Logger as T_Logger
from logging.config import dictConfig
from pathlib import Path

from pythonjsonlogger.json import JsonFormatter  # type: ignore # noqa F401

from cliphistory.config import AppSettings
from cliphistory.utils import get_time

LOGGER_NAME = "cliphistory"

logger: T_Logger = logging.getLogger(LOGGER_NAME)
system_logger = logger.getChild("SYSTEM")


def build_config(log_file_path: Path, log_level: str) -> dict:
    """dictConfig mapping: JSON lines to log_file_path, plain text to the console."""
    level = log_level.upper()
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "()": "pythonjsonlogger.json.JsonFormatter",
                "fmt": "%(asctime)s %(levelname)s %(name)s %(message)s",
            },
            "standard": {"format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"},
        },
        "handlers": {
            "file": {
                "class": "logging.FileHandler",
                "filename": str(log_file_path),
                "formatter": "json",
                "level": level,
            },
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "standard",
                "level": level,
            },
        },
        "loggers": {
            LOGGER_NAME: {
                "handlers": ["file", "console"],
                "level": level,
                "propagate": False,
            },
        },
    }


def setup_logging(settings: AppSettings, archives_to_keep: int = 10) -> T_Logger:
    """Configure the application logger and rotate the previous run's log file."""
    log_file_path = settings.logs_dir / "cliphistory.jsonl"
    log_file_path.parent.mkdir(parents=True, exist_ok=True)
    _archive_log_file(log_file_path, settings)
    dictConfig(build_config(log_file_path, settings.log_level))
    _manage_logfile_archives(log_file_path, archives_to_keep)
    system_logger.debug("Logger for %s initialized.", LOGGER_NAME)
    return logger


def _archive_log_file(log_file_path: Path, settings: AppSettings) -> None:
    """Rename a non-empty log file left by a previous run with a timestamp suffix."""
    if not log_file_path.exists() or log_file_path.stat().st_size == 0:
        return
    timestamp = get_time(settings.tz).strftime("%Y%m%d_%H%M%S")
    archive_path = log_file_path.with_name(f"{log_file_path.stem}_{timestamp}.jsonl")
    if not archive_path.exists():
        log_file_path.rename(archive_path)


def _manage_logfile_archives(log_file_path: Path, archives_to_keep: int) -> None:
    """Keep only the most recent archives."""
    archive_files = sorted(
        log_file_path.parent.glob(f"{log_file_path.stem}_*.jsonl"),
        key=lambda f: f.stat().st_mtime,
        reverse=True,
    )
    if len(archive_files) <= archives_to_keep:
        system_logger.debug("No old archive files to delete.")
        return
    for archive_file in archive_files[archives_to_keep:]:
        system_logger.debug("Deleting old archive file: %s", archive_file)
        archive_file.unlink()
