# logging_setup.py
import logging
import os
from datetime import datetime
from config import LOG_LEVEL, LOG_FILE, LOG_DIR

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Libraries whose INFO chatter drowns out recipe logs
QUIET_LOGGERS = ('urllib3', 'psycopg2')


def _log_file_handler(log_dir):
    os.makedirs(log_dir, exist_ok=True)
    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    return logging.FileHandler(os.path.join(log_dir, f"{timestamp}_{LOG_FILE}"), encoding='utf-8')


def setup_logging(log_dir=LOG_DIR, level=LOG_LEVEL):
    """
    Configure root logging for command-line runs

    Args:
        log_dir (str): Directory for a timestamped log file; None or '' logs
            to stderr only, so nothing is written to disk
        level (str): Level name; unknown names fall back to INFO

    Returns:
        logging.Logger: This module's logger
    """
    handlers = [logging.StreamHandler()]
    if log_dir:
        handlers.append(_log_file_handler(log_dir))

    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers
    )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return logging.getLogger(__name__)
