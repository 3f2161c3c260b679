"""
Relation Bitmap Compiler Package

Compiles a sparse boolean relation between two enumerated domains into a
densely bit-packed lookup table.

PIPELINE:
---------
    CSV map document  →  UncompressedRelation  →  PackedArtifact  →  emitter

This package defines PARSING and PACKING only.

How an artifact is rendered (Python source, C# source, binary file, YAML)
lives in the backends and never feeds back into the packing logic.
"""

__version__ = "0.1.0"
