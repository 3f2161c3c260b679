"""
Relation Analyzer: diagnostics and inventory of packed relations.

This module provides lightweight analysis of compiled relations:
    - Size inventory (rows, columns, buffer bytes, bits set)
    - Density and empty row/column detection
    - Duplicate member names
    - Exhaustive end-to-end verification of the addressing formula

IMPORTANT: This module does NOT modify the relation or artifact.
It only produces read-only reports.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import List, Optional, Set, Tuple

from relbitmap.model import UncompressedRelation, PackedArtifact
from relbitmap.compiler import lookup

# Above this fraction of set cells a plain 2D table is no larger.
DENSE_THRESHOLD = 0.5


@dataclass
class RelationReport:
    """Analysis report for one packed relation."""

    relation_name: str
    row_count: int = 0
    column_count: int = 0
    buffer_bytes: int = 0
    bits_set: int = 0
    density: float = 0.0

    empty_rows: List[str] = field(default_factory=list)
    empty_columns: List[str] = field(default_factory=list)
    duplicate_rows: Set[str] = field(default_factory=set)
    duplicate_columns: Set[str] = field(default_factory=set)

    mismatches: List[Tuple[int, int]] = field(default_factory=list)
    verified: bool = False

    warnings: List[str] = field(default_factory=list)

    def add_warning(self, msg: str) -> None:
        """Add a warning to the report."""
        if msg not in self.warnings:
            self.warnings.append(msg)


def verify_artifact(artifact: PackedArtifact, relation: UncompressedRelation) -> List[Tuple[int, int]]:
    """
    Query every (row, column) of the artifact and compare with the relation.

    Returns:
        Cells whose answer differs from the relation (empty when correct)
    """
    mismatches = []
    for column in range(artifact.column_count):
        for row in range(artifact.row_count):
            if lookup(artifact, row, column) != relation.is_set(row, column):
                mismatches.append((row, column))
    return mismatches


def analyze_artifact(artifact: PackedArtifact, relation: Optional[UncompressedRelation] = None) -> RelationReport:
    """
    Analyze a packed relation.

    If the source relation is given, the artifact is also verified cell by cell.
    """
    report = RelationReport(relation_name=artifact.relation_name)

    report.row_count = artifact.row_count
    report.column_count = artifact.column_count
    report.buffer_bytes = len(artifact.buffer)

    row_hits = [0] * artifact.row_count
    column_hits = [0] * artifact.column_count
    for column in range(artifact.column_count):
        for row in range(artifact.row_count):
            if lookup(artifact, row, column):
                row_hits[row] += 1
                column_hits[column] += 1
                report.bits_set += 1

    cells = artifact.row_count * artifact.column_count
    if cells > 0:
        report.density = report.bits_set / cells

    if len(artifact.row_members) == artifact.row_count:
        report.empty_rows = [artifact.row_members[i] for i, hits in enumerate(row_hits) if hits == 0]
    if len(artifact.column_members) == artifact.column_count:
        report.empty_columns = [artifact.column_members[i] for i, hits in enumerate(column_hits) if hits == 0]

    report.duplicate_rows = {name for name, n in Counter(artifact.row_members).items() if n > 1}
    report.duplicate_columns = {name for name, n in Counter(artifact.column_members).items() if n > 1}

    if relation is not None:
        report.mismatches = verify_artifact(artifact, relation)
        report.verified = not report.mismatches

    if report.density > DENSE_THRESHOLD:
        report.add_warning(f"Dense relation: {report.density:.1%} of cells set")

    if report.duplicate_rows:
        report.add_warning(f"Duplicate row members: {', '.join(sorted(report.duplicate_rows))}")

    if report.duplicate_columns:
        report.add_warning(f"Duplicate column members: {', '.join(sorted(report.duplicate_columns))}")

    if report.empty_rows:
        report.add_warning(f"Rows with no true cells: {', '.join(report.empty_rows)}")

    if report.empty_columns:
        report.add_warning(f"Columns with no true cells: {', '.join(report.empty_columns)}")

    if report.mismatches:
        report.add_warning(f"Verification failed for {len(report.mismatches)} cell(s)")

    return report
