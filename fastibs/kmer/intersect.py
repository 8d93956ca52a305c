from typing import Tuple

from ..exceptions import ConfigError
from ..utils.logging_utils import get_logger
from .database import (
    ListingIndex,
    RandomAccessIndex,
    index_file_size,
    open_for_listing,
    open_for_random_access,
    read_kmer_length,
)

logger = get_logger(__name__)


def intersection_size(listing: ListingIndex, random_access: RandomAccessIndex) -> int:
    """Count the k-mers enumerated from ``listing`` that ``random_access`` contains."""
    if listing.kmer_length != random_access.kmer_length:
        raise ConfigError(
            f"K-mer lengths do not match: {listing.kmer_length} vs {random_access.kmer_length}"
        )
    listing.restart_listing()
    shared = 0
    for kmer in listing:
        if random_access.is_member(kmer):
            shared += 1
    return shared


def order_by_size(path_a, path_b) -> Tuple[str, str]:
    """Return (smaller, larger) by file size; the smaller one gets listed."""
    if index_file_size(path_a) > index_file_size(path_b):
        return path_b, path_a
    return path_a, path_b


def intersect_indexes(path_a, path_b) -> int:
    """
    Number of canonical k-mers shared by two indexes. The smaller file is
    streamed and each of its k-mers is looked up in the larger one, which is
    loaded for random access. The result does not depend on argument order.
    """
    length_a = read_kmer_length(path_a)
    length_b = read_kmer_length(path_b)
    if length_a != length_b:
        raise ConfigError(f"K-mer lengths do not match: {path_a} has k={length_a}, {path_b} has k={length_b}")

    listing_path, random_access_path = order_by_size(path_a, path_b)
    logger.info(f"Listing {listing_path}; random access on {random_access_path}")

    random_access = open_for_random_access(random_access_path)
    with open_for_listing(listing_path) as listing:
        shared = intersection_size(listing, random_access)

    logger.info(f"Shared k-mers: {shared:,}")
    return shared
