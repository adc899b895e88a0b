import atexit
import logging
import logging.handlers
import os
from pathlib import (
    Path,
)
import queue
import sys
from typing import (
    Any,
)

# Create a log queue
log_queue: "queue.Queue[Any]" = queue.Queue()

# Store the current listener to stop it on exit
_current_listener: logging.handlers.QueueListener | None = None

# Default format for log messages
DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

ROOT_LOGGER_NAME = "mockstream"
DEBUG_ENV_VAR = "MOCKSTREAM_DEBUG"
DEBUG_FILE_ENV_VAR = "MOCKSTREAM_DEBUG_FILE"


def _parse_debug_modules(debug_str: str) -> dict[str, int]:
    """
    Parse the MOCKSTREAM_DEBUG environment variable to determine
    module-specific log levels.

    Format examples:
    - "DEBUG"  # All modules at DEBUG level
    - "mockstream.shared:DEBUG"  # Only the shared module at DEBUG
    - "shared:DEBUG"  # Same as above, mockstream prefix is optional
    - "shared:DEBUG,failing:INFO"  # Multiple modules
    """
    module_levels: dict[str, int] = {}

    if not debug_str or debug_str.isspace():
        return module_levels

    # If it's a plain log level without any colons, apply to all
    if ":" not in debug_str and debug_str.upper() in logging._nameToLevel:
        return {"": getattr(logging, debug_str.upper())}

    for part in debug_str.split(","):
        if ":" not in part:
            continue

        module, level = part.split(":", 1)
        level = level.strip().upper()

        if level not in logging._nameToLevel:
            continue

        # Remove the package prefix if present, it is added back when
        # creating the logger
        module = module.strip()
        if module.startswith(f"{ROOT_LOGGER_NAME}."):
            module = module[len(ROOT_LOGGER_NAME) + 1 :]
        module = module.replace("/", ".").strip(".")

        module_levels[module] = getattr(logging, level)

    return module_levels


def _quiet_root_logger() -> logging.Logger:
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.handlers.clear()
    root_logger.setLevel(logging.WARNING)
    root_logger.propagate = False
    return root_logger


def setup_logging() -> None:
    """
    Set up logging configuration based on environment variables.

    Environment Variables:
        MOCKSTREAM_DEBUG
            Controls logging levels. Examples:
            - "DEBUG" (all modules at DEBUG level)
            - "mockstream.shared:DEBUG" (only the shared module at DEBUG)
            - "shared:DEBUG" (same as above, mockstream prefix optional)
            - "shared:DEBUG,failing:INFO" (multiple modules)

        MOCKSTREAM_DEBUG_FILE
            If set, log records are written to this file instead of stderr.

    Loggers follow Python's dotted hierarchy: unlisted modules inherit the
    level of the ``mockstream`` logger.
    """
    global _current_listener

    if _current_listener is not None:
        _current_listener.stop()
        _current_listener = None

    debug_str = os.environ.get(DEBUG_ENV_VAR, "")
    module_levels = _parse_debug_modules(debug_str)

    if not module_levels:
        # Unset or unparseable: stay quiet
        _quiet_root_logger()
        return

    formatter = logging.Formatter(DEFAULT_LOG_FORMAT)

    handler: logging.Handler
    log_file = os.environ.get(DEBUG_FILE_ENV_VAR)
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            handler = logging.FileHandler(log_path, mode="w")
        except OSError as e:
            print(f"Error creating file handler: {e}", file=sys.stderr)
            raise
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    queue_handler = logging.handlers.QueueHandler(log_queue)

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.handlers.clear()
    root_logger.addHandler(queue_handler)
    root_logger.propagate = False
    root_logger.setLevel(module_levels.get("", logging.INFO))

    for module, level in module_levels.items():
        if module:
            logger = logging.getLogger(f"{ROOT_LOGGER_NAME}.{module}")
            logger.handlers.clear()
            logger.addHandler(queue_handler)
            logger.setLevel(level)
            logger.propagate = False  # Prevent message duplication

    # Start the listener AFTER configuring all loggers
    _current_listener = logging.handlers.QueueListener(
        log_queue, handler, respect_handler_level=True
    )
    _current_listener.start()


@atexit.register
def cleanup_logging() -> None:
    """Clean up logging resources on exit."""
    global _current_listener
    if _current_listener is not None:
        _current_listener.stop()
        _current_listener = None
