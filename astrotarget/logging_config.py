"""
Logging configuration for astrotarget.

The algorithm modules only create module-level loggers
(``logging.getLogger(__name__)``) and never configure handlers themselves.
Applications, scripts and notebooks call ``setup_logging()`` once, early, to
route those records:

- console: INFO and above, short format
- ``astrotarget.log``: everything from the ``astrotarget.algorithms`` loggers,
  including per-solve iteration counts at DEBUG level
- ``error.log``: ERROR and above from every logger

Usage:

    ```python
    from astrotarget.logging_config import setup_logging
    setup_logging(log_dir="logs")
    ```
"""

import logging
import logging.config
from pathlib import Path

#: int: Size after which a log file is rotated (bytes)
MAX_LOG_FILE_SIZE = 10485760  # 10 MB

#: int: Number of rotated log files kept
LOG_FILE_BACKUP_COUNT = 5


def setup_logging(default_level=logging.INFO, log_dir="logs", console_level="INFO"):
    """
    Configure the logging system for astrotarget.

    Parameters
    ----------
    default_level : int, optional
        Level of the root logger. Default is logging.INFO.
    log_dir : str or Path, optional
        Directory for the rotating log files, created if missing. Default is "logs".
    console_level : str or int, optional
        Level of the console handler. Default is "INFO".

    Returns
    -------
    None
        The function configures the logging system directly.
    """
    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    config = {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'standard': {
                'format': '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
                'datefmt': '%Y-%m-%d %H:%M:%S'
            },
            'detailed': {
                'format': '%(asctime)s [%(levelname)s] %(name)s (%(filename)s:%(lineno)d): %(message)s',
                'datefmt': '%Y-%m-%d %H:%M:%S'
            },
        },
        'handlers': {
            'console': {
                'class': 'logging.StreamHandler',
                'level': console_level,
                'formatter': 'standard',
                'stream': 'ext://sys.stdout',
            },
            'file': {
                'class': 'logging.handlers.RotatingFileHandler',
                'level': 'DEBUG',
                'formatter': 'detailed',
                'filename': str(log_path / 'astrotarget.log'),
                'maxBytes': MAX_LOG_FILE_SIZE,
                'backupCount': LOG_FILE_BACKUP_COUNT,
                'encoding': 'utf8'
            },
            'error_file': {
                'class': 'logging.handlers.RotatingFileHandler',
                'level': 'ERROR',
                'formatter': 'detailed',
                'filename': str(log_path / 'error.log'),
                'maxBytes': MAX_LOG_FILE_SIZE,
                'backupCount': LOG_FILE_BACKUP_COUNT,
                'encoding': 'utf8'
            },
        },
        'loggers': {
            '': {  # root logger
                'handlers': ['console', 'file', 'error_file'],
                'level': default_level,
                'propagate': True
            },
            'astrotarget.algorithms': {
                'handlers': ['console', 'file', 'error_file'],
                'level': 'DEBUG',
                'propagate': False
            },
            'astrotarget.utils': {
                'handlers': ['console', 'file'],
                'level': 'INFO',
                'propagate': False
            },
            # numba logs its compilation passes at DEBUG
            'numba': {
                'level': 'WARNING',
            },
        }
    }

    logging.config.dictConfig(config)

    logger = logging.getLogger(__name__)
    logger.debug(f"Logging configuration applied, log files in {log_path.resolve()}")
