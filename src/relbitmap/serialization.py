"""
Serialization helpers for PackedArtifact objects.

Provides lossless JSON/YAML round-trip via an intermediate dict representation.
The buffer is stored as a lowercase hex string so both formats stay text-only.
"""
from __future__ import annotations

import json
from typing import Any, Dict

import yaml

from relbitmap.model import PackedArtifact


def artifact_to_dict(a: PackedArtifact) -> Dict[str, Any]:
    return {
        "relation_name": a.relation_name,
        "row_domain_name": a.row_domain_name,
        "column_domain_name": a.column_domain_name,
        "row_count": a.row_count,
        "column_count": a.column_count,
        "row_members": list(a.row_members),
        "column_members": list(a.column_members),
        "buffer": a.buffer.hex(),
    }


def artifact_from_dict(d: Dict[str, Any]) -> PackedArtifact:
    artifact = PackedArtifact(
        relation_name=d["relation_name"],
        row_domain_name=d["row_domain_name"],
        column_domain_name=d["column_domain_name"],
        row_count=int(d["row_count"]),
        column_count=int(d["column_count"]),
        buffer=bytes.fromhex(d.get("buffer", "")),
        row_members=tuple(d.get("row_members", [])),
        column_members=tuple(d.get("column_members", [])),
    )
    expected = artifact.bytes_per_column_block * artifact.column_count
    if len(artifact.buffer) != expected:
        raise ValueError(f"Buffer holds {len(artifact.buffer)} bytes, expected {expected}")
    return artifact


def artifact_to_json(a: PackedArtifact) -> str:
    return json.dumps(artifact_to_dict(a), sort_keys=True)


def artifact_from_json(s: str) -> PackedArtifact:
    d = json.loads(s)
    return artifact_from_dict(d)


def artifact_to_yaml(a: PackedArtifact) -> str:
    return yaml.safe_dump(artifact_to_dict(a))


def artifact_from_yaml(s: str) -> PackedArtifact:
    d = yaml.safe_load(s)
    return artifact_from_dict(d)
