import sys
import time
import logging
import datetime
from pathlib import Path
from typing import Optional

# Module-level cache of WARNING and ERROR messages, replayed in the run summary
captured_logs = []

ERROR_LOG_NAME = "fastibs_error.log"


class WarningErrorCaptureHandler(logging.Handler):
    def emit(self, record):
        if record.levelno >= logging.WARNING:
            msg = self.format(record)
            captured_logs.append(msg)

def log_all_warnings_and_errors():
    logger = logging.getLogger()
    if captured_logs:
        logger.info("")
        logger.info("Summary of Warnings and Errors:")
        for msg in captured_logs:
            logger.info(f"  - {msg}")

def log_tqdm_summary(pbar, logger):
    """One log line for a finished progress bar."""
    d = pbar.format_dict
    elapsed = d["elapsed"]
    rate = d["n"] / elapsed if elapsed else 0.0
    logger.info(f"{pbar.desc or 'Tasks'}: {d['n']:,} {d['unit']}(s) in {elapsed:.1f}s ({rate:,.1f}/s)")

def setup_logging(log_file: Optional[Path] = None, stream=None):
    """Setup logging with console, optional main file, error file (warning and up), and internal cache"""

    logger = logging.getLogger()
    if logger.hasHandlers():
        for handler in list(logger.handlers):
            handler.close()
        logger.handlers.clear()
    logger.setLevel(logging.INFO)
    captured_logs.clear()

    formatter = logging.Formatter('%(message)s')

    # console handler (INFO and up)
    console_handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.INFO)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

        # warnings and errors also go to a companion file next to the main log
        error_handler = logging.FileHandler(log_file.with_name(ERROR_LOG_NAME))
        error_handler.setLevel(logging.WARNING)
        error_handler.setFormatter(formatter)
        logger.addHandler(error_handler)

    capture_handler = WarningErrorCaptureHandler()
    capture_handler.setLevel(logging.WARNING)
    capture_handler.setFormatter(formatter)
    logger.addHandler(capture_handler)

def get_logger(name: str) -> logging.Logger:
    """Get a logger instance"""
    return logging.getLogger(name)

def log_step(title: str, width: int = 80):
    text = f"[ {title} ]"
    side = (width - len(text)) // 2
    logging.getLogger().info("═" * side + text + "═" * (width - len(text) - side))


def log_summary_block(started_at: float, stats: dict):
    """Log start/end time, runtime and one aligned line per entry of ``stats``."""
    duration = time.time() - started_at
    hours, rest = divmod(int(duration), 3600)
    minutes, seconds = divmod(rest, 60)
    logger = get_logger(__name__)
    logger.info(f"{'Start time:':<30}{datetime.datetime.fromtimestamp(started_at):%Y-%m-%d %H:%M:%S}")
    logger.info(f"{'End time:':<30}{datetime.datetime.now():%Y-%m-%d %H:%M:%S}")
    logger.info(f"{'Total runtime:':<30}{hours}:{minutes:02d}:{seconds:02d}")
    logger.info('')

    for label, value in stats.items():
        logger.info(f"{label + ':':<30}{value}")
