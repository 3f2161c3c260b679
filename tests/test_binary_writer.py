"""
Tests for the binary artifact container.
"""

import io

import pytest
from relbitmap.compiler import compile_relation
from relbitmap.examples import build_example_relation
from relbitmap.model import PackedArtifact
from relbitmap.backends.binary_writer import (
    MAGIC,
    ArtifactFormatError,
    read_artifact,
    read_artifact_file,
    write_artifact,
    write_artifact_file,
)


def encode(artifact: PackedArtifact) -> bytes:
    stream = io.BytesIO()
    write_artifact(artifact, stream)
    return stream.getvalue()


def test_header_and_trailing_buffer():
    artifact = compile_relation(build_example_relation())
    data = encode(artifact)
    assert data.startswith(MAGIC)
    assert data.endswith(artifact.buffer)


def test_file_roundtrip(tmp_path):
    artifact = compile_relation(build_example_relation())
    path = tmp_path / "AnimalColor.rbmp"
    write_artifact_file(artifact, str(path))
    assert read_artifact_file(str(path)) == artifact


def test_empty_member_names_survive():
    artifact = PackedArtifact(
        relation_name="X", row_domain_name="A", column_domain_name="B",
        row_count=1, column_count=1, buffer=b"\x01", row_members=("",), column_members=("é",),
    )
    assert read_artifact(io.BytesIO(encode(artifact))) == artifact


def test_bad_magic():
    data = b"NOPE" + encode(compile_relation(build_example_relation()))[4:]
    with pytest.raises(ArtifactFormatError):
        read_artifact(io.BytesIO(data))


def test_unknown_version():
    data = bytearray(encode(compile_relation(build_example_relation())))
    data[4] = 99
    with pytest.raises(ArtifactFormatError):
        read_artifact(io.BytesIO(bytes(data)))


def test_truncated():
    data = encode(compile_relation(build_example_relation()))
    with pytest.raises(ArtifactFormatError):
        read_artifact(io.BytesIO(data[:-1]))
