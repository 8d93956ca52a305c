"""Sequence file reading and window chunking."""

from .reader import (
    FileFormat,
    SequenceRecord,
    detect_format,
    parse_sequences,
    read_sequence_file
)
from .chunker import (
    Window,
    check_window_size,
    window_bounds,
    chunk_sequence,
    chunk_records
)

__all__ = [
    'FileFormat',
    'SequenceRecord',
    'detect_format',
    'parse_sequences',
    'read_sequence_file',
    'Window',
    'check_window_size',
    'window_bounds',
    'chunk_sequence',
    'chunk_records'
]
