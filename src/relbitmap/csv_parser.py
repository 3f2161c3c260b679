"""
CSV Parser for relation maps (Raw Input → UncompressedRelation).

Converts a map document to an UncompressedRelation.

CSV Format:
    RowDomain/ColumnDomain, Column1, Column2, ...
    RowMember1, cell, cell, ...
    RowMember2, cell, cell, ...

Syntax Notes:
    - Fields are split on ',' with no trimming, quoting or escaping
    - The domain separator in the first header field may be '/' or '\\'
    - A cell is true when it is non-empty, whatever it contains
"""

import logging
import os
import re
from io import StringIO
from typing import List, Optional

from relbitmap.model import UncompressedRelation
from relbitmap.diagnostics import (
    Diagnostic,
    Location,
    ParseResult,
    RelationParseError,
    INVALID_DOCUMENT,
    INVALID_HEADER,
    INVALID_ROW_LENGTH,
)

logger = logging.getLogger(__name__)

_DOMAIN_SEPARATOR = re.compile(r"[/\\]")


def _read_lines(text: str) -> List[str]:
    """Split on \\n, \\r\\n or \\r and drop trailing empty lines."""
    lines = [line[:-1] if line.endswith("\n") else line for line in StringIO(text, newline=None)]
    while lines and lines[-1] == "":
        lines.pop()
    return lines


def _parse_header(line: str, relation: UncompressedRelation) -> None:
    """Fill domain names and column members from the header line."""
    parts = line.split(",")

    types = _DOMAIN_SEPARATOR.split(parts[0])
    if len(types) == 2:
        relation.row_domain_name = types[0]
        relation.column_domain_name = types[1]
    else:
        logger.debug("Header field %r does not name two domains", parts[0])

    relation.column_members.extend(parts[1:])


def parse_relation_string(text: str, relation_name: str = "Relation", path: str = "") -> ParseResult:
    """
    Parse one map document into a relation.

    Args:
        text: Full document text
        relation_name: Identifier for the generated artifact
        path: Document path, used only in diagnostic locations

    Returns:
        ParseResult carrying the relation and any diagnostics.
        InvalidHeader leaves relation as None; InvalidRowLength keeps the
        partial relation and parsing continues with the next line.
    """
    lines = _read_lines(text)
    header = lines[0] if lines else ""

    if header == "":
        return ParseResult(
            relation=None,
            diagnostics=[Diagnostic(INVALID_HEADER, Location.for_line(path, 0, header))],
        )

    relation = UncompressedRelation(relation_name=relation_name)
    _parse_header(header, relation)

    if not relation.is_usable:
        # Not an error: the document simply produces nothing.
        logger.debug("Relation %s is not usable; skipping data lines", relation_name)
        return ParseResult(relation=relation)

    diagnostics: List[Diagnostic] = []
    expected_fields = relation.column_count + 1

    # Malformed lines still consume a row index.
    for row, line in enumerate(lines[1:]):
        parts = line.split(",")
        if len(parts) != expected_fields:
            diagnostics.append(Diagnostic(
                INVALID_ROW_LENGTH,
                Location.for_line(path, row + 1, line),
                f"expected {expected_fields} fields, found {len(parts)}",
            ))
            continue

        relation.row_members.append(parts[0])
        for column, cell in enumerate(parts[1:]):
            if cell:
                relation.true_cells.add((row, column))

    if diagnostics:
        logger.debug("Relation %s: %d malformed row(s)", relation_name, len(diagnostics))

    return ParseResult(relation=relation, diagnostics=diagnostics)


def parse_relation_file(filepath: str, relation_name: Optional[str] = None) -> ParseResult:
    """
    Parse a map document from disk.

    Args:
        filepath: Path to the CSV file (UTF-8, optional byte order mark)
        relation_name: Optional artifact identifier (defaults to the file stem)

    Returns:
        ParseResult. A file that cannot be read or decoded yields a single
        InvalidDocument diagnostic instead of raising.
    """
    if relation_name is None:
        relation_name = os.path.splitext(os.path.basename(filepath))[0]

    try:
        with open(filepath, "r", encoding="utf-8-sig", newline="") as f:
            content = f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Cannot read map document %s: %s", filepath, e)
        return ParseResult(
            relation=None,
            diagnostics=[Diagnostic(INVALID_DOCUMENT, Location.for_line(filepath, 0, ""), str(e))],
        )

    return parse_relation_string(content, relation_name=relation_name, path=filepath)


__all__ = [
    "parse_relation_string",
    "parse_relation_file",
    "RelationParseError",
]
