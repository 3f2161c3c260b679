"""
Compilation pipeline: map document → UncompressedRelation → PackedArtifact.

Each document compiles independently; nothing is shared between documents,
so a batch may be spread over a worker pool.

Outcomes per document:
    - diagnostics present  → no artifact, diagnostics reported
    - relation not usable  → no artifact, no diagnostics (silently skipped)
    - otherwise            → artifact
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from relbitmap.config import MapEntry
from relbitmap.csv_parser import parse_relation_string, parse_relation_file
from relbitmap.compiler import compile_relation
from relbitmap.analyzer import verify_artifact
from relbitmap.diagnostics import Diagnostic, ParseResult
from relbitmap.model import PackedArtifact

logger = logging.getLogger(__name__)


class VerificationError(Exception):
    """Raised when a compiled artifact disagrees with its source relation."""
    pass


@dataclass
class CompileOutcome:
    """Result of compiling one document."""
    relation_name: str
    path: str = ""
    artifact: Optional[PackedArtifact] = None
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def skipped(self) -> bool:
        """True for an unusable relation: no artifact and nothing to report."""
        return self.artifact is None and not self.diagnostics


def _compile_parsed(result: ParseResult, relation_name: str, path: str, verify: bool) -> CompileOutcome:
    outcome = CompileOutcome(relation_name=relation_name, path=path, diagnostics=list(result.diagnostics))

    if result.diagnostics:
        logger.debug("Not compiling %s: %d diagnostic(s)", relation_name, len(result.diagnostics))
        return outcome

    if result.relation is None or not result.relation.is_usable:
        logger.debug("Skipping %s: relation is not usable", relation_name)
        return outcome

    artifact = compile_relation(result.relation)
    if verify:
        mismatches = verify_artifact(artifact, result.relation)
        if mismatches:
            raise VerificationError(
                f"{relation_name}: {len(mismatches)} cell(s) disagree after packing, first {mismatches[0]}"
            )

    outcome.artifact = artifact
    return outcome


def compile_document(text: str, relation_name: str, path: str = "", verify: bool = False) -> CompileOutcome:
    """
    Parse and compile one in-memory document.

    Args:
        text: Full map document text
        relation_name: Fully-qualified artifact identifier
        path: Document path for diagnostics
        verify: Query every cell after packing and raise on disagreement
    """
    result = parse_relation_string(text, relation_name=relation_name, path=path)
    return _compile_parsed(result, relation_name, path, verify)


def compile_file(entry: MapEntry, verify: bool = False) -> CompileOutcome:
    """Parse and compile one map document from disk."""
    result = parse_relation_file(entry.path, relation_name=entry.relation_name)
    return _compile_parsed(result, entry.relation_name, entry.path, verify)


def compile_documents(entries: Iterable[MapEntry], workers: int = 1, verify: bool = False) -> List[CompileOutcome]:
    """
    Compile many map documents.

    Args:
        entries: Documents to compile
        workers: Thread count; 1 compiles sequentially
        verify: Passed through to each compilation

    Returns:
        One CompileOutcome per entry, in input order
    """
    entries = list(entries)
    if workers <= 1 or len(entries) <= 1:
        outcomes = [compile_file(entry, verify=verify) for entry in entries]
    else:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            outcomes = list(pool.map(lambda entry: compile_file(entry, verify=verify), entries))

    compiled = sum(1 for o in outcomes if o.artifact is not None)
    failed = sum(1 for o in outcomes if o.diagnostics)
    logger.info("Compiled %d of %d map(s); %d with diagnostics", compiled, len(outcomes), failed)
    return outcomes


__all__ = [
    "CompileOutcome",
    "VerificationError",
    "compile_document",
    "compile_file",
    "compile_documents",
]
