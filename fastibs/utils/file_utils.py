import io
import gzip
import logging
import multiprocessing
from pathlib import Path

GZIP_MAGIC = b"\x1f\x8b"


def is_gzipped(path) -> bool:
    """Check the leading magic bytes rather than trusting the file extension"""
    with open(path, "rb") as handle:
        return handle.read(2) == GZIP_MAGIC


def open_text_auto(path) -> io.TextIOBase:
    """Open a plain or gzip-compressed file for text reading."""
    if is_gzipped(path):
        return io.TextIOWrapper(gzip.open(path, "rb"), encoding="utf-8")
    return open(path, "r", encoding="utf-8")


def read_text_auto(path) -> str:
    with open_text_auto(path) as handle:
        return handle.read()


def ensure_parent_dir(path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def log_thread_info(user_threads: int):
    logger = logging.getLogger()
    try:
        total_cores = multiprocessing.cpu_count()
    except NotImplementedError:
        total_cores = 'unknown'

    logger.info(f"Detected {total_cores} logical cores. Currently using {user_threads} thread(s). You can modify this via the --threads option.")

    if isinstance(total_cores, int) and user_threads > total_cores:
        logger.warning(f"You requested {user_threads} threads, but only {total_cores} logical cores are available. Consider reducing --threads.")
