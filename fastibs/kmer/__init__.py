"""K-mer encoding, index access, window statistics, coverage mapping and intersection."""

from .encoder import (
    reverse_complement,
    canonical_kmer,
    iter_canonical_kmers,
    canonical_kmers,
    count_valid_kmers
)
from .database import (
    IndexInfo,
    RandomAccessIndex,
    ListingIndex,
    open_for_random_access,
    open_for_listing,
    read_kmer_length,
    index_info,
    log_index_info
)
from .comparison import (
    WindowStats,
    gap_contribution,
    compute_window_stats,
    process_reference,
    write_stats_table
)
from .mapping import (
    coverage_array,
    format_coverage,
    produce_mapping,
    write_mapping
)
from .intersect import (
    intersection_size,
    intersect_indexes
)

__all__ = [
    'reverse_complement',
    'canonical_kmer',
    'iter_canonical_kmers',
    'canonical_kmers',
    'count_valid_kmers',
    'IndexInfo',
    'RandomAccessIndex',
    'ListingIndex',
    'open_for_random_access',
    'open_for_listing',
    'read_kmer_length',
    'index_info',
    'log_index_info',
    'WindowStats',
    'gap_contribution',
    'compute_window_stats',
    'process_reference',
    'write_stats_table',
    'coverage_array',
    'format_coverage',
    'produce_mapping',
    'write_mapping',
    'intersection_size',
    'intersect_indexes'
]
