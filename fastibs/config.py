import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .exceptions import ConfigError

DEFAULT_WINDOW_SIZE = 50000


def default_threads() -> int:
    return os.cpu_count() or 1


@dataclass
class Config:
    """Configuration for a single index-versus-reference run"""
    index_path: str
    sequence_path: str
    output_path: str
    window_size: int = DEFAULT_WINDOW_SIZE
    threads: Optional[int] = None

    def __post_init__(self):
        """Validate parameters and create the output directory"""
        if not isinstance(self.window_size, int) or self.window_size < 1:
            raise ConfigError(f"Window size must be a positive integer, got {self.window_size!r}")
        if self.threads is None:
            self.threads = default_threads()
        if self.threads < 1:
            raise ConfigError(f"Thread count must be at least 1, got {self.threads}")
        Path(self.output_path).parent.mkdir(parents=True, exist_ok=True)
