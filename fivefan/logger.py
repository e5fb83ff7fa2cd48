"""
Logging System

Per-module loggers for the 5FAN response core. Level, console output and
the log file come from the ``logging.*`` config keys; files live under
``logging.dir`` and one handler per file is shared by every module.
"""

import logging
import os
import sys
from pathlib import Path
from typing import Dict, Optional, Tuple

FILE_ONLY_ENV_VAR = "FIVEFAN_LOG_FILE_ONLY"
FILE_ONLY_LOG_NAME = "console.log"
DEFAULT_LOG_DIR = "logs"

_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
_DATEFMT = '%Y-%m-%d %H:%M:%S'


class Logger:
    """Centralized logger for 5FAN"""

    _loggers: Dict[str, logging.Logger] = {}
    _file_handlers: Dict[Path, logging.FileHandler] = {}

    @classmethod
    def get_logger(cls, name: str, config=None) -> logging.Logger:
        """
        Get or create a logger instance

        Args:
            name: Logger name (usually __name__)
            config: Configuration object (optional); only the first call
                for a name configures it

        Returns:
            Configured logger instance
        """
        if name in cls._loggers:
            return cls._loggers[name]

        logger = logging.getLogger(name)
        if not logger.handlers:
            cls._configure_logger(logger, config)

        cls._loggers[name] = logger
        return logger

    @staticmethod
    def resolve_settings(config=None) -> Tuple[int, Optional[Path], bool]:
        """
        Work out (level, log file path, console enabled) for a config

        A relative ``logging.file`` is placed under ``logging.dir``. With
        FIVEFAN_LOG_FILE_ONLY set (hosts that own the terminal), console
        output is off and everything goes to ``<logging.dir>/console.log``.
        """
        get = config.get if config else (lambda key, default=None: default)

        level_str = get("logging.level", "INFO")
        level = getattr(logging, str(level_str).upper(), logging.INFO)
        log_dir = Path(get("logging.dir", DEFAULT_LOG_DIR) or DEFAULT_LOG_DIR).expanduser()
        log_file = get("logging.file")
        console_enabled = bool(get("logging.console", True))

        if os.environ.get(FILE_ONLY_ENV_VAR):
            return level, log_dir / FILE_ONLY_LOG_NAME, False

        if not log_file:
            return level, None, console_enabled
        path = Path(log_file).expanduser()
        if not path.is_absolute():
            path = log_dir / path
        return level, path, console_enabled

    @classmethod
    def _file_handler(cls, path: Path) -> logging.FileHandler:
        handler = cls._file_handlers.get(path)
        if handler is None:
            path.parent.mkdir(parents=True, exist_ok=True)
            handler = logging.FileHandler(path, encoding="utf-8")
            handler.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATEFMT))
            cls._file_handlers[path] = handler
        return handler

    @classmethod
    def _configure_logger(cls, logger: logging.Logger, config) -> None:
        """Attach console and file handlers"""
        level, log_path, console_enabled = cls.resolve_settings(config)
        logger.setLevel(level)

        if console_enabled:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(level)
            console_handler.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATEFMT))
            logger.addHandler(console_handler)

        if log_path:
            logger.addHandler(cls._file_handler(log_path))

        # Prevent propagation to root logger
        logger.propagate = False

    @classmethod
    def reset(cls) -> None:
        """Detach every handler and close the shared log files."""
        for logger in cls._loggers.values():
            for handler in list(logger.handlers):
                logger.removeHandler(handler)
        for handler in cls._file_handlers.values():
            handler.close()
        cls._loggers.clear()
        cls._file_handlers.clear()


def get_logger(name: str, config=None) -> logging.Logger:
    """
    Convenience function to get a logger

    Args:
        name: Logger name (usually __name__)
        config: Configuration object (optional)

    Returns:
        Configured logger instance
    """
    return Logger.get_logger(name, config)
