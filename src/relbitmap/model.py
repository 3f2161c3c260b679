"""
Core Relation Model Objects

Defines the data structures passed between the parser and the compiler:
    - UncompressedRelation (parsed, pre-compression form)
    - PackedArtifact (compiled bitmap plus everything an emitter needs)

ARCHITECTURAL RULE:
    These objects:
        - Know nothing about output syntax
        - Treat domain members as opaque strings
        - Represent structure, not behavior
"""

from dataclasses import dataclass, field
from typing import List, Optional, Set, Tuple


Cell = Tuple[int, int]


def split_type_name(fully_qualified_name: str) -> Tuple[str, str]:
    """
    Split a fully-qualified identifier into (namespace, simple name).

    The separator is the last '.'. Without a usable separator both parts
    are the identifier itself.

    Examples:
        "Zoo.Maps.AnimalColor" -> ("Zoo.Maps", "AnimalColor")
        "AnimalColor"          -> ("AnimalColor", "AnimalColor")
    """
    namespace = fully_qualified_name
    simple_name = fully_qualified_name
    index = fully_qualified_name.rfind(".")
    if index > 0:
        namespace = fully_qualified_name[:index]
        if index < len(fully_qualified_name) - 1:
            simple_name = fully_qualified_name[index + 1:]
    return namespace, simple_name


@dataclass
class UncompressedRelation:
    """
    A sparse boolean relation as read from one map document.

    Properties:
        relation_name:
            Identifier of the generated artifact, supplied by the caller
            Example: "Zoo.Maps.AnimalColor"

        row_domain_name / column_domain_name:
            Names of the two enumerated domains (left/right of the header's
            first field). None when the header did not name both.

        row_members:
            One entry per well-formed data line, in order of appearance.
            Duplicates are kept.

        column_members:
            Header fields after the first, in order of appearance.

        true_cells:
            Set of (row_index, column_index) pairs whose cell was non-empty.

    INVARIANTS (for a usable relation produced without diagnostics):
        - 0 <= row_index < len(row_members)
        - 0 <= column_index < len(column_members)
    """

    relation_name: str
    row_domain_name: Optional[str] = None
    column_domain_name: Optional[str] = None
    row_members: List[str] = field(default_factory=list)
    column_members: List[str] = field(default_factory=list)
    true_cells: Set[Cell] = field(default_factory=set)

    @property
    def row_count(self) -> int:
        return len(self.row_members)

    @property
    def column_count(self) -> int:
        return len(self.column_members)

    @property
    def is_usable(self) -> bool:
        """Both domains are named and at least one column is declared."""
        return bool(self.row_domain_name) and bool(self.column_domain_name) and len(self.column_members) > 0

    def is_set(self, row: int, column: int) -> bool:
        return (row, column) in self.true_cells


@dataclass(frozen=True)
class PackedArtifact:
    """
    The compiled bitmap.

    Bit for cell (r, c) lives at flat offset ``r + c * row_count``; byte
    ``offset // 8``, bit ``offset % 8`` counted from the least significant bit.

    ``row_count`` is the multiplier of the query formula and must travel with
    the buffer: it cannot be recovered from ``len(buffer)`` alone.
    """

    relation_name: str
    row_domain_name: str
    column_domain_name: str
    row_count: int
    column_count: int
    buffer: bytes
    row_members: Tuple[str, ...] = ()
    column_members: Tuple[str, ...] = ()

    @property
    def bytes_per_column_block(self) -> int:
        return (self.row_count + 7) // 8

    @property
    def bits_per_column_block(self) -> int:
        return self.bytes_per_column_block * 8

    @property
    def namespace(self) -> str:
        return split_type_name(self.relation_name)[0]

    @property
    def simple_name(self) -> str:
        return split_type_name(self.relation_name)[1]
