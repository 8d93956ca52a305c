import gzip
import logging
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def reset_root_logger():
    # commands attach handlers to the root logger; drop them between tests
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        handler.close()
        root.removeHandler(handler)


# Fixture returning a helper that writes text files under tmp_path, e.g.
#
#   def test_something(write_file):
#       path = write_file("ref.fa", ">chr1\nACGT\n")
#       gz = write_file("ref.fa.gz", ">chr1\nACGT\n", compress=True)
#
@pytest.fixture
def write_file(tmp_path):
    def _write(name: str, text: str, compress: bool = False) -> Path:
        path = tmp_path / name
        if compress:
            with gzip.open(path, "wt") as f:
                f.write(text)
        else:
            path.write_text(text)
        return path
    return _write


@pytest.fixture
def write_index(write_file):
    def _write(name: str, kmers, kmer_length=None, compress: bool = False) -> Path:
        lines = []
        if kmer_length is not None:
            lines.append(f"# kmer_length={kmer_length}")
        lines.extend(f"{kmer}\t1" for kmer in kmers)
        return write_file(name, "\n".join(lines) + "\n", compress=compress)
    return _write
