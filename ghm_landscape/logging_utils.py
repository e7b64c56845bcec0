"""
Logging setup shared by the workflow, the CLI and the tutorial script.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

ROOT_LOGGER_NAME = 'ghm_landscape'

FORMATS = {
    'standard': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    'simple': '%(levelname)s: %(message)s',
}


def setup_logging(
    level: Union[str, int] = 'INFO',
    component_name: Optional[str] = None,
    log_file: Optional[Union[str, Path]] = None,
    format_style: str = 'standard'
) -> logging.Logger:
    """
    Route all log records to stdout, and to log_file when given.

    Args:
        level: Logging level name or constant
        component_name: Suffix of the returned logger under ``ghm_landscape``
        log_file: Optional log file, parent directories are created
        format_style: 'standard' (timestamped) or 'simple'

    Returns:
        logging.Logger: ``ghm_landscape.<component_name>`` logger
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper())

    formatter = logging.Formatter(FORMATS.get(format_style, FORMATS['standard']),
                                  datefmt='%Y-%m-%d %H:%M:%S')

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(level)
    for handler in handlers:
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    if component_name:
        return logging.getLogger(f'{ROOT_LOGGER_NAME}.{component_name}')
    return logging.getLogger(ROOT_LOGGER_NAME)


def log_pipeline_start(logger: logging.Logger, pipeline_name: str, config: dict = None) -> None:
    logger.info(f"Starting {pipeline_name}")
    for section, values in (config or {}).items():
        logger.info(f"  {section}: {values}")


def log_pipeline_end(logger: logging.Logger, pipeline_name: str, success: bool = True, elapsed_time: float = None) -> None:
    status = "finished" if success else "FAILED"
    if elapsed_time is None:
        logger.info(f"{pipeline_name} {status}")
    else:
        minutes, seconds = divmod(int(elapsed_time), 60)
        logger.info(f"{pipeline_name} {status} after {minutes}m {seconds:02d}s")


def log_section(logger: logging.Logger, section_name: str) -> None:
    logger.info(f"--- {section_name} ---")
