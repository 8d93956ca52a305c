from dataclasses import dataclass, astuple
from typing import List, Optional

import pandas as pd

from ..exceptions import OutputError
from ..sequences.chunker import Window, check_window_size, chunk_records
from ..sequences.reader import read_sequence_file
from ..utils.file_utils import ensure_parent_dir
from ..utils.logging_utils import get_logger
from ..utils.tasks import run_tasks
from .database import RandomAccessIndex
from .encoder import iter_canonical_kmers

logger = get_logger(__name__)

STATS_COLUMNS = [
    'seqname',
    'start',
    'end',
    'total_kmers',
    'observed_kmers',
    'variations',
    'kmer_distance',
]


@dataclass(frozen=True)
class WindowStats:
    sequence_id: str
    start: int
    end: int
    total_kmers: int = 0
    observed_kmers: int = 0
    variations: int = 0
    kmer_distance: int = 0


def gap_contribution(gap_length: int, kmer_length: int) -> int:
    """
    Distance added by one run of ``gap_length`` consecutive absent k-mers.

    A single base change knocks out k overlapping k-mers, so k - 1 is
    subtracted from the run; shorter runs fold back to a small positive value.
    """
    contribution = gap_length - (kmer_length - 1)
    if contribution <= 0:
        contribution = abs(contribution + 1)
    return contribution


def compute_window_stats(window: Window, index: RandomAccessIndex) -> WindowStats:
    """Count present k-mers and summarize runs of absent ones for one window."""
    kmer_length = index.kmer_length
    total_kmers = 0
    observed_kmers = 0
    variations = 0
    kmer_distance = 0
    gap_length = 0

    for _, kmer in iter_canonical_kmers(window.subsequence, kmer_length):
        total_kmers += 1
        if index.is_member(kmer):
            observed_kmers += 1
            if gap_length > 0:
                kmer_distance += gap_contribution(gap_length, kmer_length)
                variations += 1
                gap_length = 0
        else:
            gap_length += 1

    if gap_length > 0:
        kmer_distance += gap_contribution(gap_length, kmer_length)
        variations += 1

    return WindowStats(
        sequence_id=window.sequence_id,
        start=window.start,
        end=window.end,
        total_kmers=total_kmers,
        observed_kmers=observed_kmers,
        variations=variations,
        kmer_distance=kmer_distance,
    )


def compute_all_window_stats(
    windows: List[Window],
    index: RandomAccessIndex,
    threads: Optional[int] = None,
    progress: bool = True,
) -> List[WindowStats]:
    return run_tasks(
        lambda window: compute_window_stats(window, index),
        windows,
        threads=threads,
        desc="Calculating stats",
        unit="window",
        progress=progress,
    )


def stats_to_frame(stats: List[WindowStats]) -> pd.DataFrame:
    return pd.DataFrame([astuple(s) for s in stats], columns=STATS_COLUMNS)


def write_stats_table(stats: List[WindowStats], output_path) -> None:
    """Write one tab-separated row per window, in generation order."""
    try:
        output_path = ensure_parent_dir(output_path)
        stats_to_frame(stats).to_csv(output_path, sep='\t', index=False)
    except OSError as e:
        raise OutputError(f"Unable to write stats to {output_path}: {e}")
    logger.info(f"Stats for {len(stats):,} windows saved to: {output_path}")


def process_reference(
    index: RandomAccessIndex,
    sequence_path,
    output_path,
    window_size: int,
    threads: Optional[int] = None,
    progress: bool = True,
) -> List[WindowStats]:
    """
    Compute per-window k-mer statistics of a reference file against an index
    and write them as TSV. Returns the stats in sequence order then window
    order.
    """
    logger.info(f"Window size: {window_size}")
    logger.info(f"K-mer size: {index.kmer_length}")
    check_window_size(window_size, index.kmer_length)

    logger.info(f"Reading sequences from {sequence_path}")
    records = read_sequence_file(sequence_path)
    windows = chunk_records(records, window_size, index.kmer_length)
    logger.info(f"Number of windows: {len(windows):,}")

    stats = compute_all_window_stats(windows, index, threads=threads, progress=progress)
    write_stats_table(stats, output_path)
    return stats
