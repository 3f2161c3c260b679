"""
Binary container for packed relation bitmaps.

Layout (all integers little-endian):

    magic           4 bytes   b"RBMP"
    version         1 byte
    row_count       uint32
    column_count    uint32
    3 names         uint16 length + UTF-8 bytes each:
                    relation, row domain, column domain
    2 member lists  uint32 count, then that many names:
                    row members, column members
    buffer          ceil(row_count / 8) * column_count bytes
"""

import struct
from typing import BinaryIO

from relbitmap.compiler import bytes_per_column_block
from relbitmap.model import PackedArtifact

MAGIC = b"RBMP"
FORMAT_VERSION = 1

_HEADER = struct.Struct("<4sBII")
_NAME_LENGTH = struct.Struct("<H")
_MEMBER_COUNT = struct.Struct("<I")


class ArtifactFormatError(Exception):
    """Raised when a binary artifact cannot be decoded."""
    pass


def _write_name(stream: BinaryIO, text: str) -> None:
    data = text.encode("utf-8")
    if len(data) > 0xFFFF:
        raise ValueError(f"Name too long for binary artifact: {len(data)} bytes")
    stream.write(_NAME_LENGTH.pack(len(data)))
    stream.write(data)


def _read_exact(stream: BinaryIO, size: int) -> bytes:
    data = stream.read(size)
    if len(data) != size:
        raise ArtifactFormatError(f"Truncated artifact: wanted {size} bytes, got {len(data)}")
    return data


def _read_name(stream: BinaryIO) -> str:
    (length,) = _NAME_LENGTH.unpack(_read_exact(stream, _NAME_LENGTH.size))
    return _read_exact(stream, length).decode("utf-8")


def _write_members(stream: BinaryIO, members) -> None:
    stream.write(_MEMBER_COUNT.pack(len(members)))
    for name in members:
        _write_name(stream, name)


def _read_members(stream: BinaryIO) -> tuple:
    (count,) = _MEMBER_COUNT.unpack(_read_exact(stream, _MEMBER_COUNT.size))
    return tuple(_read_name(stream) for _ in range(count))


def write_artifact(artifact: PackedArtifact, stream: BinaryIO) -> None:
    """Serialize an artifact to a binary stream."""
    stream.write(_HEADER.pack(MAGIC, FORMAT_VERSION, artifact.row_count, artifact.column_count))
    _write_name(stream, artifact.relation_name)
    _write_name(stream, artifact.row_domain_name)
    _write_name(stream, artifact.column_domain_name)
    _write_members(stream, artifact.row_members)
    _write_members(stream, artifact.column_members)
    stream.write(artifact.buffer)


def read_artifact(stream: BinaryIO) -> PackedArtifact:
    """
    Decode an artifact written by write_artifact.

    Raises:
        ArtifactFormatError: on bad magic, unknown version or truncation
    """
    magic, version, row_count, column_count = _HEADER.unpack(_read_exact(stream, _HEADER.size))
    if magic != MAGIC:
        raise ArtifactFormatError(f"Bad magic {magic!r}")
    if version != FORMAT_VERSION:
        raise ArtifactFormatError(f"Unsupported artifact version {version}")

    relation_name = _read_name(stream)
    row_domain_name = _read_name(stream)
    column_domain_name = _read_name(stream)
    row_members = _read_members(stream)
    column_members = _read_members(stream)

    buffer = _read_exact(stream, bytes_per_column_block(row_count) * column_count)

    return PackedArtifact(
        relation_name=relation_name,
        row_domain_name=row_domain_name,
        column_domain_name=column_domain_name,
        row_count=row_count,
        column_count=column_count,
        buffer=buffer,
        row_members=row_members,
        column_members=column_members,
    )


def write_artifact_file(artifact: PackedArtifact, filename: str) -> None:
    with open(filename, "wb") as f:
        write_artifact(artifact, f)


def read_artifact_file(filename: str) -> PackedArtifact:
    with open(filename, "rb") as f:
        return read_artifact(f)


__all__ = [
    "ArtifactFormatError",
    "read_artifact",
    "read_artifact_file",
    "write_artifact",
    "write_artifact_file",
]
