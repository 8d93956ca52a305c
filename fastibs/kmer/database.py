"""Read-only access to pre-built k-mer indexes.

An index is a k-mer dump as written by ``kmc_dump`` or ``jellyfish dump``:
one k-mer per line, optionally followed by whitespace and a count. Lines
starting with '>' (jellyfish FASTA-style count headers) are ignored. A comment
line such as ``# kmer_length=31`` declares the k-mer length, which is only
needed when the index holds no k-mers at all. Files may be gzip-compressed.

The two access modes are separate classes:

* ``RandomAccessIndex`` answers membership queries. It is immutable once
  loaded and may be shared by any number of worker threads.
* ``ListingIndex`` streams the k-mers once through a single cursor. It keeps
  an open file handle and must not be shared between consumers.

A dump made without strand merging (``jellyfish dump`` of a non-canonical
database) lists a k-mer and its reverse complement on separate lines. Both
modes collapse such pairs, so each canonical k-mer is seen exactly once.
"""

import os
import re
import zlib
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, Optional

from ..exceptions import KmerIndexError
from ..utils.file_utils import open_text_auto
from ..utils.logging_utils import get_logger
from .encoder import canonical_kmer, is_valid_kmer

logger = get_logger(__name__)

HEADER_PATTERN = re.compile(r"kmer_length\s*[=:]\s*(\d+)")


@dataclass(frozen=True)
class IndexInfo:
    path: str
    kmer_length: int
    total_kmers: int
    file_size: int


class _DumpParser:
    """Line parser shared by both access modes; tracks and checks the k-mer length."""

    def __init__(self, path):
        self.path = path
        self.kmer_length = None

    def _set_length(self, length: int, line_number: int):
        if length < 1:
            raise KmerIndexError(f"{self.path}:{line_number}: k-mer length must be positive")
        if self.kmer_length is None:
            self.kmer_length = length
        elif length != self.kmer_length:
            raise KmerIndexError(
                f"{self.path}:{line_number}: k-mer length {length} differs from {self.kmer_length}"
            )

    def parse(self, handle) -> Iterator[str]:
        try:
            for line_number, line in enumerate(handle, 1):
                line = line.strip()
                if not line or line.startswith(">"):
                    continue
                if line.startswith("#"):
                    match = HEADER_PATTERN.search(line)
                    if match:
                        self._set_length(int(match.group(1)), line_number)
                    continue
                kmer = line.split()[0].upper()
                if not is_valid_kmer(kmer):
                    raise KmerIndexError(f"{self.path}:{line_number}: invalid k-mer {kmer!r}")
                self._set_length(len(kmer), line_number)
                yield canonical_kmer(kmer)
        except (OSError, UnicodeDecodeError, EOFError, zlib.error) as e:
            raise KmerIndexError(f"Failed to read k-mer index {self.path}: {e}")


def _open_index(path):
    path = Path(path)
    if not path.is_file():
        raise KmerIndexError(f"K-mer index not found: {path}")
    try:
        return open_text_auto(path)
    except OSError as e:
        raise KmerIndexError(f"Failed to open k-mer index {path}: {e}")


def _missing_length(path) -> KmerIndexError:
    return KmerIndexError(
        f"Cannot determine the k-mer length of {path}: the index is empty "
        f"and has no '# kmer_length=<k>' header"
    )


def read_kmer_length(path) -> int:
    """Read only as far as the header or first k-mer to learn the k-mer length."""
    parser = _DumpParser(path)
    with _open_index(path) as handle:
        for _ in parser.parse(handle):
            break
    if parser.kmer_length is None:
        raise _missing_length(path)
    return parser.kmer_length


def index_file_size(path) -> int:
    try:
        return os.path.getsize(path)
    except OSError as e:
        raise KmerIndexError(f"Cannot stat k-mer index {path}: {e}")


class RandomAccessIndex:
    """Membership queries against a fixed set of canonical k-mers."""

    def __init__(self, kmers: Iterable[str], kmer_length: int, source: Optional[str] = None):
        if kmer_length < 1:
            raise KmerIndexError(f"K-mer length must be positive, got {kmer_length}")
        self._kmers = frozenset(kmers)
        self._kmer_length = kmer_length
        self.source = source

    @classmethod
    def from_kmers(cls, kmers: Iterable[str], kmer_length: int) -> "RandomAccessIndex":
        """Build an in-memory index, canonicalizing and validating every k-mer."""
        canonical = set()
        for kmer in kmers:
            kmer = kmer.upper()
            if len(kmer) != kmer_length or not is_valid_kmer(kmer):
                raise KmerIndexError(f"Invalid {kmer_length}-mer: {kmer!r}")
            canonical.add(canonical_kmer(kmer))
        return cls(canonical, kmer_length)

    @property
    def kmer_length(self) -> int:
        return self._kmer_length

    def is_member(self, kmer: str) -> bool:
        return kmer in self._kmers

    def __contains__(self, kmer) -> bool:
        return self.is_member(kmer)

    def __len__(self) -> int:
        return len(self._kmers)

    def __repr__(self):
        return f"RandomAccessIndex(k={self._kmer_length}, kmers={len(self._kmers)}, source={self.source!r})"


class ListingIndex:
    """
    One-pass enumeration of the distinct canonical k-mers of an index file.
    ``next_in_listing`` returns None once the listing is exhausted;
    ``restart_listing`` rewinds to the start.
    """

    def __init__(self, path):
        self.path = Path(path)
        self._kmer_length = read_kmer_length(self.path)
        self._handle = None
        self._cursor = None
        self._seen = set()
        self.restart_listing()

    @property
    def kmer_length(self) -> int:
        return self._kmer_length

    def restart_listing(self):
        self.close()
        parser = _DumpParser(self.path)
        self._handle = _open_index(self.path)
        self._cursor = parser.parse(self._handle)
        self._seen = set()

    def next_in_listing(self) -> Optional[str]:
        if self._cursor is None:
            return None
        for kmer in self._cursor:
            if kmer not in self._seen:
                self._seen.add(kmer)
                return kmer
        self.close()
        return None

    def close(self):
        if self._cursor is not None:
            self._cursor.close()
            self._cursor = None
        if self._handle is not None:
            self._handle.close()
            self._handle = None
        self._seen = set()

    def __iter__(self):
        kmer = self.next_in_listing()
        while kmer is not None:
            yield kmer
            kmer = self.next_in_listing()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


def open_for_random_access(path) -> RandomAccessIndex:
    parser = _DumpParser(path)
    with _open_index(path) as handle:
        kmers = frozenset(parser.parse(handle))
    if parser.kmer_length is None:
        raise _missing_length(path)
    logger.info(f"Loaded {len(kmers):,} canonical {parser.kmer_length}-mers from {path}")
    return RandomAccessIndex(kmers, parser.kmer_length, source=str(path))


def open_for_listing(path) -> ListingIndex:
    return ListingIndex(path)


def index_info(path) -> IndexInfo:
    with open_for_listing(path) as listing:
        total = sum(1 for _ in listing)
        kmer_length = listing.kmer_length
    return IndexInfo(
        path=str(path),
        kmer_length=kmer_length,
        total_kmers=total,
        file_size=index_file_size(path),
    )


def log_index_info(info: IndexInfo):
    logger.info("********** K-mer index info **********")
    logger.info(f"{'Path:':<20}{info.path}")
    logger.info(f"{'K-mer length:':<20}{info.kmer_length}")
    logger.info(f"{'Total k-mers:':<20}{info.total_kmers:,}")
    logger.info(f"{'File size:':<20}{info.file_size:,} bytes")
