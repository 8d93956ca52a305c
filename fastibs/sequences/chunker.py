from dataclasses import dataclass
from typing import Iterable, List, Tuple

from ..exceptions import ConfigError
from .reader import SequenceRecord


@dataclass(frozen=True)
class Window:
    sequence_id: str
    start: int
    end: int
    subsequence: str


def check_window_size(window_size: int, kmer_length: int):
    if kmer_length < 1:
        raise ConfigError(f"K-mer length must be at least 1, got {kmer_length}")
    # a window no longer than k would never advance
    if window_size <= kmer_length:
        raise ConfigError(f"Window size ({window_size}) must be greater than the k-mer length ({kmer_length})")


def window_bounds(length: int, window_size: int, kmer_length: int) -> List[Tuple[int, int]]:
    """
    Return (start, end) pairs of overlapping windows over a sequence of the
    given length. Each window advances by ``window_size - kmer_length`` so a
    k-mer crossing a window edge is always whole in one of the two windows.
    The last window may be shorter than ``window_size``.
    """
    check_window_size(window_size, kmer_length)
    step = window_size - kmer_length
    return [(offset, min(offset + window_size, length)) for offset in range(0, length, step)]


def chunk_sequence(record: SequenceRecord, window_size: int, kmer_length: int) -> List[Window]:
    return [
        Window(record.id, start, end, record.bases[start:end])
        for start, end in window_bounds(len(record.bases), window_size, kmer_length)
    ]


def chunk_records(records: Iterable[SequenceRecord], window_size: int, kmer_length: int) -> List[Window]:
    """Windows of every record, in record order then offset order."""
    check_window_size(window_size, kmer_length)
    windows = []
    for record in records:
        windows.extend(chunk_sequence(record, window_size, kmer_length))
    return windows
