import os
import logging

# Marker substituted for inventory fields a message does not carry
UNAVAILABLE = "n/a"

# Keys that can name the parameter a message carries
NAME_KEYS = ("parameterName", "name", "shortName", "cfName")
DEFAULT_NAME_KEY = "parameterName"

# Oldest pygrib release with keys(), is_missing() and multi_support_on/off
MIN_PYGRIB_VERSION = (2, 1)

# Arrays longer than this are summarised in CLI output
ARRAY_PREVIEW_LENGTH = 10


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


MULTI_FIELD_SUPPORT = _env_flag("GRIB_MULTI_FIELD_SUPPORT")

LOG_LEVEL = os.environ.get("GRIB_INSPECTOR_LOG_LEVEL", "INFO")
LOG_FILE = os.environ.get("GRIB_INSPECTOR_LOG_FILE", "grib_inspector.log")


def configure_logging(level: str = None, log_file: str = None) -> None:
    """Set up root logging for the CLI and the HTTP app"""
    level = (level or LOG_LEVEL).upper()
    log_file = LOG_FILE if log_file is None else log_file

    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.insert(0, logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True,
    )
