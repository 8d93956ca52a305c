import pandas as pd
import pytest

from fastibs.exceptions import ConfigError, OutputError, TaskError
from fastibs.kmer.comparison import (
    STATS_COLUMNS,
    WindowStats,
    compute_all_window_stats,
    compute_window_stats,
    gap_contribution,
    process_reference,
    write_stats_table,
)
from fastibs.kmer.database import RandomAccessIndex, open_for_random_access
from fastibs.sequences import SequenceRecord, Window, chunk_records

SEQ20 = "ACGTTGCAACGGTTAACCGT"


def whole(sequence, name="s"):
    return Window(name, 0, len(sequence), sequence)


@pytest.mark.parametrize("gap, k, expected", [
    (16, 5, 12),
    (5, 5, 1),
    (4, 5, 1),
    (3, 5, 0),
    (1, 5, 2),
    (3, 4, 1),
    (1, 1, 1),
])
def test_gap_contribution(gap, k, expected):
    assert gap_contribution(gap, k) == expected


def test_empty_index_single_gap():
    index = RandomAccessIndex([], 5)
    stats = compute_window_stats(whole(SEQ20), index)
    assert stats == WindowStats("s", 0, 20, total_kmers=16, observed_kmers=0, variations=1, kmer_distance=12)


def test_acgtacgt_regression():
    index = RandomAccessIndex.from_kmers(["ACGT"], 4)
    stats = compute_window_stats(whole("ACGTACGT"), index)
    # offsets 0 and 4 hit; CGTA, GTAC, CGTA form one gap of 3
    assert stats.total_kmers == 5
    assert stats.observed_kmers == 2
    assert stats.variations == 1
    assert stats.kmer_distance == 1


def test_single_isolated_gap():
    index = RandomAccessIndex.from_kmers(["AAA"], 3)
    stats = compute_window_stats(whole("AAAAACAAAAA"), index)
    assert (stats.total_kmers, stats.observed_kmers) == (9, 6)
    assert stats.variations == 1
    assert stats.kmer_distance == gap_contribution(3, 3)


def test_distance_accumulates_over_gaps():
    index = RandomAccessIndex.from_kmers(["AAA"], 3)
    stats = compute_window_stats(whole("AAAAACAAAAACAAA"), index)
    assert stats.total_kmers == 13
    assert stats.observed_kmers == 7
    assert stats.variations == 2
    assert stats.kmer_distance == 2


def test_trailing_gap_closed():
    index = RandomAccessIndex.from_kmers(["AAA"], 3)
    stats = compute_window_stats(whole("AAAACCCCCC"), index)
    # AAA AAA | AAC ACC CCC CCC CCC CCC
    assert stats.observed_kmers == 2
    assert stats.variations == 1
    assert stats.kmer_distance == gap_contribution(6, 3)


def test_ambiguous_window_is_empty():
    index = RandomAccessIndex.from_kmers(["AAA"], 3)
    assert compute_window_stats(whole("NNNNNNNN"), index) == WindowStats("s", 0, 8)
    assert compute_window_stats(whole("AA"), index) == WindowStats("s", 0, 2)


def test_ambiguous_bases_do_not_break_runs():
    index = RandomAccessIndex([], 3)
    # two valid k-mers on each side of the N; skipped offsets are not counted
    stats = compute_window_stats(whole("ACGTNACGT"), index)
    assert stats.total_kmers == 4
    assert stats.variations == 1
    assert stats.kmer_distance == gap_contribution(4, 3)


def test_parallel_order_matches_serial():
    index = RandomAccessIndex.from_kmers(["ACG", "TTG", "CAA"], 3)
    records = [SequenceRecord(f"chr{i}", SEQ20 * (i + 3)) for i in range(4)]
    windows = chunk_records(records, 11, 3)
    serial = [compute_window_stats(w, index) for w in windows]
    parallel = compute_all_window_stats(windows, index, threads=4, progress=False)
    assert parallel == serial
    assert [(s.sequence_id, s.start) for s in parallel] == [(w.sequence_id, w.start) for w in windows]


class BrokenIndex:
    kmer_length = 3

    def is_member(self, kmer):
        raise RuntimeError("index unavailable")


def test_task_failures_are_aggregated():
    windows = chunk_records([SequenceRecord("s", SEQ20)], 8, 3)
    with pytest.raises(TaskError) as excinfo:
        compute_all_window_stats(windows, BrokenIndex(), threads=2, progress=False)
    assert len(excinfo.value.failures) == len(windows)
    assert all(isinstance(f.error, RuntimeError) for f in excinfo.value.failures)


def test_process_reference_writes_tsv(write_file, write_index, tmp_path):
    ref = write_file("ref.fa", f">chr1\n{SEQ20[:10]}\n{SEQ20[10:]}\n")
    index = open_for_random_access(write_index("db.txt", [], kmer_length=5))
    out = tmp_path / "out" / "stats.tsv"

    stats = process_reference(index, ref, out, window_size=10, threads=2, progress=False)

    assert out.read_text().splitlines()[0] == \
        "seqname\tstart\tend\ttotal_kmers\tobserved_kmers\tvariations\tkmer_distance"
    table = pd.read_csv(out, sep="\t")
    assert list(table.columns) == STATS_COLUMNS
    assert table.values.tolist() == [
        ["chr1", 0, 10, 6, 0, 1, 2],
        ["chr1", 5, 15, 6, 0, 1, 2],
        ["chr1", 10, 20, 6, 0, 1, 2],
        ["chr1", 15, 20, 1, 0, 1, 2],
    ]
    assert len(stats) == 4


def test_process_reference_multiple_records(write_file, write_index, tmp_path):
    ref = write_file("ref.fa", ">a\nACGTACGT\n>b\nACGTACGT\n")
    index = open_for_random_access(write_index("db.txt", ["ACGT"]))
    stats = process_reference(index, ref, tmp_path / "s.tsv", window_size=100, threads=3, progress=False)
    assert [s.sequence_id for s in stats] == ["a", "b"]
    assert [s.observed_kmers for s in stats] == [2, 2]


def test_window_size_checked_before_reading(tmp_path):
    index = RandomAccessIndex([], 5)
    with pytest.raises(ConfigError):
        process_reference(index, tmp_path / "missing.fa", tmp_path / "s.tsv", window_size=5, progress=False)


def test_unwritable_stats_output(tmp_path):
    stats = [WindowStats("s", 0, 10, 6, 6)]
    with pytest.raises(OutputError):
        write_stats_table(stats, tmp_path)
    blocker = tmp_path / "plain_file"
    blocker.write_text("")
    with pytest.raises(OutputError):
        write_stats_table(stats, blocker / "stats.tsv")
