"""Canonical k-mer extraction.

Canonical form is the lexicographically smaller of a k-mer and its reverse
complement. Index files and sequence queries both go through
``canonical_kmer`` so the two sides always agree.
"""

from typing import Iterator, List, Tuple

from ..exceptions import ConfigError

BASES = frozenset("ACGT")
COMPLEMENT = str.maketrans("ACGT", "TGCA")


def reverse_complement(kmer: str) -> str:
    """Reverse complement of an upper-case ACGT string."""
    return kmer.translate(COMPLEMENT)[::-1]


def canonical_kmer(kmer: str) -> str:
    rev_comp = reverse_complement(kmer)
    return rev_comp if kmer > rev_comp else kmer


def is_valid_kmer(kmer: str) -> bool:
    return bool(kmer) and BASES.issuperset(kmer)


def iter_canonical_kmers(sequence: str, kmer_length: int) -> Iterator[Tuple[int, str]]:
    """
    Yield (offset, canonical k-mer) for every offset whose k-mer contains only
    A, C, G or T. The sequence is upper-cased first; offsets covering any other
    character are skipped without emitting anything.
    """
    if kmer_length < 1:
        raise ConfigError(f"K-mer length must be at least 1, got {kmer_length}")

    sequence = sequence.upper()
    last_invalid = -1
    for end, base in enumerate(sequence):
        if base not in BASES:
            last_invalid = end
            continue
        start = end - kmer_length + 1
        if start > last_invalid and start >= 0:
            yield start, canonical_kmer(sequence[start:end + 1])


def canonical_kmers(sequence: str, kmer_length: int) -> List[str]:
    return [kmer for _, kmer in iter_canonical_kmers(sequence, kmer_length)]


def count_valid_kmers(sequence: str, kmer_length: int) -> int:
    return sum(1 for _ in iter_canonical_kmers(sequence, kmer_length))
