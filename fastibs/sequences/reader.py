import io
import zlib
from enum import Enum
from typing import Iterable, List, NamedTuple

from Bio.SeqIO.FastaIO import SimpleFastaParser

from ..exceptions import ParseError
from ..utils.file_utils import read_text_auto
from ..utils.logging_utils import get_logger

logger = get_logger(__name__)


class FileFormat(Enum):
    FASTA = ">"
    FASTQ = "@"

    @property
    def label(self) -> str:
        return self.name.lower()


class SequenceRecord(NamedTuple):
    id: str
    bases: str


def detect_format(data: str) -> FileFormat:
    """Detect FASTA/FASTQ from the first non-whitespace character."""
    stripped = data.lstrip()
    if not stripped:
        raise ParseError("Empty sequence input")
    try:
        return FileFormat(stripped[0])
    except ValueError:
        raise ParseError(f"Unknown sequence format: input starts with {stripped[0]!r}, expected '>' or '@'")


def _parse_fastq(lines: Iterable[str]) -> List[SequenceRecord]:
    """
    Lenient FASTQ reader. A line starting with '+' opens the quality block and
    exactly one following line is dropped, whatever its length.
    """
    records = []
    current_id = None
    current_seq = []
    in_quality = False

    for line in lines:
        line = line.rstrip("\r\n")
        if not line:
            continue
        if line.startswith("+"):
            in_quality = True
            continue
        if in_quality:
            in_quality = False
            continue
        if line.startswith("@"):
            if current_id is not None:
                records.append(SequenceRecord(current_id, "".join(current_seq)))
            current_id = line[1:]
            current_seq = []
        else:
            current_seq.append(line.strip())

    if current_id is not None:
        records.append(SequenceRecord(current_id, "".join(current_seq)))
    return records


def parse_sequences(data: str) -> List[SequenceRecord]:
    """
    Parse FASTA or FASTQ text into ordered (id, bases) records.

    The id is the full header line without its '>' or '@' marker. Records
    without any sequence are dropped.
    """
    file_format = detect_format(data)
    text = data.lstrip()

    if file_format is FileFormat.FASTA:
        records = [SequenceRecord(title, seq) for title, seq in SimpleFastaParser(io.StringIO(text))]
    else:
        records = _parse_fastq(io.StringIO(text))

    kept = []
    for record in records:
        if not record.bases:
            logger.warning(f"Skipping record '{record.id}' with empty sequence")
            continue
        kept.append(record)

    logger.info(f"Parsed {len(kept):,} {file_format.label} record(s)")
    return kept


def read_sequence_file(path) -> List[SequenceRecord]:
    """Read a plain or gzip-compressed FASTA/FASTQ file."""
    try:
        data = read_text_auto(path)
    except FileNotFoundError:
        raise ParseError(f"Sequence file not found: {path}")
    except (OSError, UnicodeDecodeError, EOFError, zlib.error) as e:
        raise ParseError(f"Failed to read sequence file {path}: {e}")
    return parse_sequences(data)
