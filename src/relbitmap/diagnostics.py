"""
Diagnostics for map documents.

Structural problems in a map document are reported as data (Diagnostic
objects collected in a ParseResult), not raised. Error kinds are immutable
descriptors defined once at import time.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from relbitmap.model import UncompressedRelation


class Severity(Enum):
    """Severity attached to an error kind."""
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class ErrorKind:
    """Static description of one class of diagnostic."""
    id: str
    title: str
    category: str = "Source Generation"
    severity: Severity = Severity.ERROR


INVALID_DOCUMENT = ErrorKind("SQLSG001", "invalid csv file")
INVALID_HEADER = ErrorKind("SQLSG002", "invalid csv header")
INVALID_ROW_LENGTH = ErrorKind("SQLSG003", "invalid csv row")

ERROR_KINDS = {kind.id: kind for kind in (INVALID_DOCUMENT, INVALID_HEADER, INVALID_ROW_LENGTH)}


@dataclass(frozen=True)
class Location:
    """
    Where a diagnostic points.

    Properties:
        path: Document path (may be empty for in-memory text)
        line: 0-based line number within the document
        start_character / end_character: 0-based character span on that line;
            end_character is len(line_text) - 1
        text_span: (start, length) of the line text
    """
    path: str
    line: int
    start_character: int
    end_character: int
    text_span: Tuple[int, int]

    @classmethod
    def for_line(cls, path: str, line: int, line_text: str) -> Location:
        return cls(
            path=path,
            line=line,
            start_character=0,
            end_character=len(line_text) - 1,
            text_span=(0, len(line_text)),
        )


@dataclass(frozen=True)
class Diagnostic:
    """One reported problem."""
    kind: ErrorKind
    location: Location
    message: str = ""

    def __str__(self) -> str:
        text = self.message or self.kind.title
        return f"{self.location.path}:{self.location.line}: {self.kind.id} {text}"


class RelationParseError(Exception):
    """Raised when a caller asks for the relation of a failed parse."""

    def __init__(self, diagnostics: List[Diagnostic]):
        self.diagnostics = list(diagnostics)
        super().__init__("; ".join(str(d) for d in self.diagnostics) or "relation is not usable")


@dataclass
class ParseResult:
    """
    Tagged outcome of parsing one document.

    relation is None only when the header itself was rejected. An unusable
    relation (missing domain names or no columns) comes back with no
    diagnostics and ok == False.
    """
    relation: Optional[UncompressedRelation] = None
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.diagnostics and self.relation is not None and self.relation.is_usable

    def unwrap(self) -> UncompressedRelation:
        if not self.ok:
            raise RelationParseError(self.diagnostics)
        return self.relation
