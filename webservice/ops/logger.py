import logging
import sys
from pathlib import Path
from datetime import datetime

def setup_logger(session_id: str, logs_dir: str = "logs", console_level: str = "INFO") -> logging.Logger:
    """
    Configures the root logger:
    - Console: console_level (INFO by default)
    - File: DEBUG level (logs/debug_{timestamp}_{session_id}.log)
    """
    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG)

    # Clear existing handlers to avoid duplicates during re-runs or tests
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(threadName)s - %(message)s"
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    log_path = Path(logs_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    filename = f"debug_{datetime.now().strftime('%Y%m%d_%H%M%S')}_{session_id}.log"
    file_handler = logging.FileHandler(log_path / filename, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    # urllib3 connection chatter drowns out the dispatch log at DEBUG.
    logging.getLogger("urllib3").setLevel(logging.INFO)

    return logger
