"""Backends for packed artifact output (Python/C# source, binary files)."""

from .source_generator import SourceMode, generate_source, save_source_file
from .binary_writer import (
    ArtifactFormatError,
    read_artifact,
    read_artifact_file,
    write_artifact,
    write_artifact_file,
)

__all__ = [
    "SourceMode",
    "generate_source",
    "save_source_file",
    "ArtifactFormatError",
    "read_artifact",
    "read_artifact_file",
    "write_artifact",
    "write_artifact_file",
]
