"""
Logging configuration.

One console handler for every process, an optional debug log file, and a table
of per-module levels so the agent runtime, the provider pipeline and the HTTP
layer can be tuned independently. Defaults come from the server settings
(``DESKMATE_AI_LOG_LEVEL``, ``LOG_FORMAT``, ``LOG_FILE_DIR``,
``ENABLE_FILE_LOGGING``).
"""

import logging
from pathlib import Path
from typing import Optional

LOG_FILE_NAME = "deskmate_ai.log"

FORMATS = {
    "simple": "%(levelname)s - %(name)s - %(message)s",
    "detailed": "%(asctime)s %(levelname)-8s %(name)s:%(lineno)d - %(message)s",
    "json": '{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}',
}

# Policy decisions and provider traffic are logged at DEBUG; OS collaborators
# and the record store only report at INFO and above.
MODULE_LOG_LEVELS = {
    "deskmate_ai.agent_core.policy": "DEBUG",
    "deskmate_ai.agent_core.operations": "INFO",
    "deskmate_ai.llm": "DEBUG",
    "deskmate_ai.core.database": "INFO",
    "deskmate_ai.server": "INFO",
    "sqlalchemy.engine": "WARNING",
    "httpx": "WARNING",
    "httpcore": "WARNING",
    "uvicorn.access": "WARNING",
}


def setup_logging(
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
    enable_file: bool = True,
) -> None:
    """
    Replace the root handlers and apply ``MODULE_LOG_LEVELS``.

    Args:
        log_level: Console level; defaults to the configured level.
        log_format: ``simple``, ``detailed`` or ``json``; unknown names use ``detailed``.
        enable_file: Allow the file handler; it is only added when file logging is also enabled in settings.
    """
    # Deferred: the settings module is part of the server package.
    from deskmate_ai.server.core.config import settings

    level = (log_level or settings.log_level).upper()
    fmt = log_format or settings.log_format
    formatter = logging.Formatter(FORMATS.get(fmt, FORMATS["detailed"]), datefmt="%Y-%m-%d %H:%M:%S")

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(formatter)
    root.addHandler(console)

    file_logging = enable_file and settings.enable_file_logging
    if file_logging:
        log_dir = Path(settings.log_file_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_dir / LOG_FILE_NAME)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    for name, module_level in MODULE_LOG_LEVELS.items():
        logging.getLogger(name).setLevel(module_level)

    root.info(f"Logging configured: level={level}, format={fmt}, file_logging={file_logging}")


def get_logger(name: str) -> logging.Logger:
    """Return the logger for ``name`` (typically ``__name__``)."""
    return logging.getLogger(name)
