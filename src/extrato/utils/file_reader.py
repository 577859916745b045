"""Streaming helpers for uploaded statement files."""

import codecs
import csv
import hashlib
import io
from typing import BinaryIO, Iterator

from extrato.domain.entities import Encoding
from extrato.domain.errors import ValidationError, row_error

CHUNK_SIZE = 64 * 1024
SNIFF_SIZE = 8 * 1024
DELIMITERS = ",;\t"

_UTF8_BOM = codecs.BOM_UTF8


def as_stream(source: bytes | BinaryIO) -> BinaryIO:
    """Wrap raw bytes in a seekable binary stream; pass streams through."""
    if isinstance(source, (bytes, bytearray, memoryview)):
        return io.BytesIO(bytes(source))
    return source


def _iter_chunks(stream: BinaryIO) -> Iterator[bytes]:
    stream.seek(0)
    while True:
        chunk = stream.read(CHUNK_SIZE)
        if not chunk:
            break
        yield chunk
    stream.seek(0)


def compute_checksum(source: bytes | BinaryIO) -> str:
    """Compute the SHA-256 hex digest of raw file content.

    Streams are read in chunks and rewound afterwards.
    """
    digest = hashlib.sha256()
    for chunk in _iter_chunks(as_stream(source)):
        digest.update(chunk)
    return digest.hexdigest()


def detect_encoding(source: bytes | BinaryIO) -> Encoding:
    """Detect whether file content is UTF-8 or Latin-1.

    A UTF-8 BOM, or content that decodes as strict UTF-8 from start to end,
    is UTF-8. Anything else is treated as Latin-1, which accepts every byte.
    """
    stream = as_stream(source)
    stream.seek(0)
    head = stream.read(len(_UTF8_BOM))
    if head == _UTF8_BOM:
        stream.seek(0)
        return Encoding.UTF8

    decoder = codecs.getincrementaldecoder("utf-8")(errors="strict")
    try:
        for chunk in _iter_chunks(stream):
            decoder.decode(chunk)
        decoder.decode(b"", final=True)
    except UnicodeDecodeError:
        stream.seek(0)
        return Encoding.LATIN1
    return Encoding.UTF8


def sniff_delimiter(sample: str) -> str:
    """Guess the field delimiter from a text sample, defaulting to comma."""
    sniffer = csv.Sniffer()
    # Decimal commas make "," look as consistent as the real delimiter.
    sniffer.preferred = [";", "\t", ","]
    try:
        return sniffer.sniff(sample, delimiters=DELIMITERS).delimiter
    except csv.Error:
        first_line = next((line for line in sample.splitlines() if line.strip()), "")
        counts = {d: first_line.count(d) for d in DELIMITERS}
        best = max(counts, key=lambda d: counts[d])
        return best if counts[best] > 0 else ","


def iter_csv_rows(
    source: bytes | BinaryIO, encoding: Encoding, has_header: bool = True
) -> Iterator[tuple[int, list[str]]]:
    """Yield (line number, cells) for each data row, one row at a time.

    Blank lines are skipped. When has_header is True the first non-blank row
    is skipped as well. Line numbers are 1-based and refer to the file.

    Raises:
        ValidationError: If the csv reader rejects a line, e.g. an unclosed
            quote running past the field size limit
    """
    stream = as_stream(source)
    stream.seek(0)
    sample = stream.read(SNIFF_SIZE).decode(encoding.codec, errors="replace")
    stream.seek(0)
    delimiter = sniff_delimiter(sample)

    wrapper = io.TextIOWrapper(stream, encoding=encoding.codec, newline="")
    try:
        reader = csv.reader(wrapper, delimiter=delimiter)
        header_pending = has_header
        while True:
            try:
                cells = next(reader)
            except StopIteration:
                break
            except csv.Error as e:
                raise ValidationError(row_error(reader.line_num, e)) from e
            if not any(cell.strip() for cell in cells):
                continue
            if header_pending:
                header_pending = False
                continue
            yield reader.line_num, cells
    finally:
        # Leave the caller's stream open.
        wrapper.detach()
