"""
Tests for the Relation Analyzer.

Tests verify that the analyzer correctly:
    - Inventories rows, columns and set bits
    - Flags dense relations, duplicates and empty columns
    - Detects an artifact that disagrees with its relation
"""

from dataclasses import replace

from relbitmap.model import UncompressedRelation
from relbitmap.compiler import compile_relation
from relbitmap.analyzer import analyze_artifact, verify_artifact
from relbitmap.examples import build_example_relation


def test_example_inventory():
    relation = build_example_relation()
    report = analyze_artifact(compile_relation(relation), relation)

    assert report.row_count == 2
    assert report.column_count == 3
    assert report.buffer_bytes == 3
    assert report.bits_set == 3
    assert report.density == 0.5
    assert report.verified
    assert report.mismatches == []
    assert report.empty_columns == []
    assert report.warnings == []


def test_dense_relation_warning():
    relation = UncompressedRelation(
        relation_name="Dense", row_domain_name="A", column_domain_name="B",
        row_members=["r0", "r1"], column_members=["c0", "c1"],
        true_cells={(0, 0), (0, 1), (1, 0)},
    )
    report = analyze_artifact(compile_relation(relation))
    assert any("Dense relation" in w for w in report.warnings)
    assert not report.verified


def test_duplicates_and_empty_columns():
    relation = UncompressedRelation(
        relation_name="Dupes", row_domain_name="A", column_domain_name="B",
        row_members=["r", "r", "s", "t"], column_members=["c", "d", "d"],
        true_cells={(0, 0)},
    )
    report = analyze_artifact(compile_relation(relation))
    assert report.duplicate_rows == {"r"}
    assert report.duplicate_columns == {"d"}
    assert report.empty_columns == ["d", "d"]
    assert report.empty_rows == ["r", "s", "t"]
    assert "Rows with no true cells: r, s, t" in report.warnings


def test_tampered_buffer_detected():
    relation = build_example_relation()
    artifact = compile_relation(relation)
    tampered = replace(artifact, buffer=bytes([0x27, 0x00, 0x00]))

    assert verify_artifact(tampered, relation) == [(0, 0)]
    report = analyze_artifact(tampered, relation)
    assert not report.verified
    assert any("Verification failed" in w for w in report.warnings)


def test_swapped_multiplier_detected():
    """Querying with the column count as multiplier gives wrong answers."""
    relation = build_example_relation()
    artifact = compile_relation(relation)
    wrong = 0
    for c in range(artifact.column_count):
        for r in range(artifact.row_count):
            offset = r + c * artifact.column_count
            bit = (artifact.buffer[offset // 8] >> (offset % 8)) & 1 == 1
            if bit != relation.is_set(r, c):
                wrong += 1
    assert wrong > 0
