from typing import List, Optional, Tuple

import numpy as np

from ..exceptions import OutputError
from ..sequences.reader import SequenceRecord, read_sequence_file
from ..utils.file_utils import ensure_parent_dir
from ..utils.logging_utils import get_logger
from ..utils.tasks import run_tasks
from .database import RandomAccessIndex
from .encoder import iter_canonical_kmers

logger = get_logger(__name__)


def coverage_array(sequence: str, index: RandomAccessIndex) -> np.ndarray:
    """
    Per-base count of index k-mers covering each position of the sequence.

    Every offset whose canonical k-mer is in the index adds one to the k
    positions it spans. Offsets with ambiguous bases contribute nothing.
    """
    kmer_length = index.kmer_length
    coverage = np.zeros(len(sequence), dtype=np.int32)
    for offset, kmer in iter_canonical_kmers(sequence, kmer_length):
        if index.is_member(kmer):
            coverage[offset:offset + kmer_length] += 1
    return coverage


def format_coverage(coverage: np.ndarray) -> str:
    return ",".join(str(value) for value in coverage.tolist())


def map_record(record: SequenceRecord, index: RandomAccessIndex) -> Tuple[str, str]:
    return record.id, format_coverage(coverage_array(record.bases, index))


def write_mapping(mappings: List[Tuple[str, str]], output_path) -> None:
    """Two lines per sequence: the id, then its comma-separated coverage."""
    try:
        output_path = ensure_parent_dir(output_path)
        with open(output_path, 'w') as out:
            for seq_id, coverage in mappings:
                out.write(f"{seq_id}\n{coverage}\n")
    except OSError as e:
        raise OutputError(f"Unable to write mapping to {output_path}: {e}")
    logger.info(f"Mapping for {len(mappings):,} sequences saved to: {output_path}")


def produce_mapping(
    index: RandomAccessIndex,
    sequence_path,
    output_path,
    threads: Optional[int] = None,
    progress: bool = True,
) -> List[Tuple[str, str]]:
    logger.info(f"K-mer size: {index.kmer_length}")
    logger.info(f"Reading sequences from {sequence_path}")
    records = read_sequence_file(sequence_path)

    mappings = run_tasks(
        lambda record: map_record(record, index),
        records,
        threads=threads,
        desc="Calculating mapping",
        unit="sequence",
        progress=progress,
    )
    write_mapping(mappings, output_path)
    return mappings
