"""
Tests for serialization and deserialization of packed artifacts.

These tests ensure lossless JSON/YAML round-trip using the explicit
serialization functions in `relbitmap.serialization`.
"""

import json

import pytest
from relbitmap.compiler import compile_relation, lookup_members
from relbitmap.examples import build_example_relation
from relbitmap.model import PackedArtifact
from relbitmap.serialization import (
    artifact_to_dict,
    artifact_from_dict,
    artifact_to_json,
    artifact_from_json,
    artifact_to_yaml,
    artifact_from_yaml,
)


def build_sample_artifact() -> PackedArtifact:
    return compile_relation(build_example_relation("Zoo.Maps.AnimalColor"))


def test_dict_layout():
    d = artifact_to_dict(build_sample_artifact())
    assert d["row_count"] == 2
    assert d["column_count"] == 3
    assert d["buffer"] == "260000"
    assert d["row_members"] == ["Cat", "Dog"]


def test_json_roundtrip():
    artifact = build_sample_artifact()
    restored = artifact_from_json(artifact_to_json(artifact))
    assert restored == artifact
    assert lookup_members(restored, "Dog", "Blue")


def test_json_is_sorted():
    text = artifact_to_json(build_sample_artifact())
    assert list(json.loads(text)) == sorted(json.loads(text))


def test_yaml_roundtrip():
    artifact = build_sample_artifact()
    restored = artifact_from_yaml(artifact_to_yaml(artifact))
    assert restored == artifact


def test_buffer_length_checked():
    d = artifact_to_dict(build_sample_artifact())
    d["buffer"] = "26"
    with pytest.raises(ValueError):
        artifact_from_dict(d)
