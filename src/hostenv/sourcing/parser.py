"""Parse ``NAME=VALUE`` environment dumps into a snapshot."""

from __future__ import annotations

import io
from typing import IO, Dict, Iterable, Iterator, Tuple, Union

DumpInput = Union[bytes, bytearray, str, IO[bytes], Iterable[Union[bytes, str]]]


def _decode(line: Union[bytes, str], encoding: str) -> str:
    if isinstance(line, (bytes, bytearray)):
        return bytes(line).decode(encoding, errors="replace")
    return line


def decode_lines(stream: IO[bytes], encoding: str = "utf-8") -> io.TextIOWrapper:
    """Wrap a binary stream so it yields decoded text lines.

    Decoding happens before line splitting, so encodings with multi-byte
    newlines (UTF-16, UTF-32) split correctly.
    """
    return io.TextIOWrapper(stream, encoding=encoding, errors="replace", newline="")


def iter_entries(
    lines: Iterable[Union[bytes, str]],
    encoding: str = "utf-8",
) -> Iterator[Tuple[str, str]]:
    """Yield ``(name, value)`` pairs from a line-oriented dump.

    Works on any iterable of lines, so a pipe or file object is consumed
    one line at a time. Byte lines are decoded one by one, which only
    works for ASCII-compatible encodings; wrap other streams with
    ``decode_lines`` first. Lines without ``=`` (banners, blank lines) and
    lines with an empty name are skipped.
    """
    for raw in lines:
        line = _decode(raw, encoding).rstrip("\r\n")
        name, sep, value = line.partition("=")
        if not sep or not name:
            continue
        yield name, value


def parse_environment(data: DumpInput, encoding: str = "utf-8") -> Dict[str, str]:
    """Parse an environment dump into a snapshot.

    Args:
        data: Raw dump as bytes or text, a binary stream, or an iterable
            of lines
        encoding: Encoding for byte input; undecodable bytes are replaced

    Returns:
        Mapping of variable name to value; later duplicates win
    """
    if isinstance(data, (bytes, bytearray)):
        lines: Iterable[Union[bytes, str]] = decode_lines(io.BytesIO(bytes(data)), encoding)
    elif isinstance(data, str):
        lines = io.StringIO(data, newline="\n")
    elif isinstance(data, (io.RawIOBase, io.BufferedIOBase)):
        lines = decode_lines(data, encoding)
    else:
        lines = data

    snapshot: Dict[str, str] = {}
    for name, value in iter_entries(lines, encoding):
        snapshot[name] = value
    return snapshot
