import pytest

from fastibs.exceptions import ConfigError
from fastibs.kmer.database import RandomAccessIndex, open_for_listing
from fastibs.kmer.intersect import intersect_indexes, intersection_size, order_by_size


@pytest.fixture
def index_pair(write_index):
    small = write_index("small.txt", ["ACG", "AAA", "CCC"])
    # CGT and TTT are the reverse complements of ACG and AAA
    large = write_index("large.txt", ["CGT", "TTT", "GGA", "ATC", "CAT", "GAC"])
    return small, large


def test_intersection_is_symmetric(index_pair):
    small, large = index_pair
    assert intersect_indexes(small, large) == 2
    assert intersect_indexes(large, small) == 2


def test_order_by_size(index_pair):
    small, large = index_pair
    assert order_by_size(large, small) == (small, large)
    assert order_by_size(small, large) == (small, large)


def test_intersection_size_either_direction(index_pair):
    small, large = index_pair
    with open_for_listing(small) as listing:
        assert intersection_size(listing, RandomAccessIndex.from_kmers(["CGT", "TTT", "GGA"], 3)) == 2
    with open_for_listing(large) as listing:
        assert intersection_size(listing, RandomAccessIndex.from_kmers(["ACG", "AAA", "CCC"], 3)) == 2


def test_intersection_with_empty_index(index_pair, write_index):
    small, _ = index_pair
    empty = write_index("empty.txt", [], kmer_length=3)
    assert intersect_indexes(small, empty) == 0
    assert intersect_indexes(empty, small) == 0


def test_self_intersection(index_pair):
    small, _ = index_pair
    assert intersect_indexes(small, small) == 3


def test_mismatched_kmer_length(index_pair, write_index):
    small, _ = index_pair
    other = write_index("k4.txt", ["ACGT"])
    with pytest.raises(ConfigError):
        intersect_indexes(small, other)
    with open_for_listing(small) as listing:
        with pytest.raises(ConfigError):
            intersection_size(listing, RandomAccessIndex.from_kmers(["ACGT"], 4))


def test_strand_duplicates_counted_once(write_file):
    # same size on disk, so argument order decides which file is listed
    a = write_file("a.txt", "AAAC\nGTTT\n")
    b = write_file("b.txt", "AAAC\nCCCC\n")
    assert a.stat().st_size == b.stat().st_size
    assert intersect_indexes(a, b) == 1
    assert intersect_indexes(b, a) == 1
