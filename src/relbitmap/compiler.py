"""
Bitmap Compiler (UncompressedRelation → PackedArtifact).

Addressing scheme, shared by packing and querying:

    offset     = row + column * row_count
    byte_index = offset // 8
    bit_index  = offset % 8          (least significant bit first)

The buffer is sized in whole column blocks of ceil(row_count / 8) bytes.
"""

import logging
from typing import Dict, Mapping, Optional, Tuple

from relbitmap.model import UncompressedRelation, PackedArtifact

logger = logging.getLogger(__name__)


def bytes_per_column_block(row_count: int) -> int:
    """ceil(row_count / 8)"""
    return (row_count + 7) // 8


def get_bit_index(row: int, row_count: int, column: int, column_count: int) -> Tuple[int, int]:
    """
    Map a cell to its (byte_index, bit_index).

    Raises:
        IndexError: if row or column falls outside its domain
    """
    if not 0 <= row < row_count:
        raise IndexError(f"row {row} out of range for {row_count} rows")
    if not 0 <= column < column_count:
        raise IndexError(f"column {column} out of range for {column_count} columns")
    return divmod(row + column * row_count, 8)


def compile_relation(relation: UncompressedRelation) -> PackedArtifact:
    """
    Pack every true cell of a usable relation into a byte buffer.

    Args:
        relation: Relation produced by the parser without diagnostics

    Returns:
        PackedArtifact with the buffer and the counts the query needs

    Raises:
        ValueError: if the relation is not usable
        IndexError: if a true cell lies outside the declared members
    """
    if not relation.is_usable:
        raise ValueError(f"Relation {relation.relation_name!r} is not usable and cannot be compiled")

    row_count = relation.row_count
    column_count = relation.column_count

    buffer = bytearray(bytes_per_column_block(row_count) * column_count)
    for row, column in relation.true_cells:
        byte_index, bit_index = get_bit_index(row, row_count, column, column_count)
        buffer[byte_index] |= 1 << bit_index

    logger.debug(
        "Compiled %s: %d rows x %d columns, %d cells set, %d bytes",
        relation.relation_name, row_count, column_count, len(relation.true_cells), len(buffer),
    )

    return PackedArtifact(
        relation_name=relation.relation_name,
        row_domain_name=relation.row_domain_name,
        column_domain_name=relation.column_domain_name,
        row_count=row_count,
        column_count=column_count,
        buffer=bytes(buffer),
        row_members=tuple(relation.row_members),
        column_members=tuple(relation.column_members),
    )


def lookup(artifact: PackedArtifact, row, column) -> bool:
    """
    Query the packed bitmap by ordinal.

    row and column may be ints or anything int() accepts (e.g. IntEnum members).
    """
    byte_index, bit_index = get_bit_index(int(row), artifact.row_count, int(column), artifact.column_count)
    return (artifact.buffer[byte_index] >> bit_index) & 1 == 1


def _ordinals(members) -> Dict[str, int]:
    ordinals = {}
    for index, name in enumerate(members):
        ordinals.setdefault(name, index)
    return ordinals


def member_ordinals(artifact: PackedArtifact) -> Tuple[Dict[str, int], Dict[str, int]]:
    """
    Build the default (row_ordinals, column_ordinals) bindings of an artifact.

    Pass the result to lookup_members when querying the same artifact many
    times; without it every call rebuilds both mappings.
    """
    return _ordinals(artifact.row_members), _ordinals(artifact.column_members)


def lookup_members(
    artifact: PackedArtifact,
    row_member: str,
    column_member: str,
    row_ordinals: Optional[Mapping[str, int]] = None,
    column_ordinals: Optional[Mapping[str, int]] = None,
) -> bool:
    """
    Query the packed bitmap by member name.

    The name → ordinal binding may be injected; by default it is the order
    in which members appeared in the map document (first occurrence wins).
    The default bindings cost O(members) per call; for repeated queries
    build them once with member_ordinals() and pass them in.

    Raises:
        KeyError: if a name is not bound to an ordinal
    """
    if row_ordinals is None:
        row_ordinals = _ordinals(artifact.row_members)
    if column_ordinals is None:
        column_ordinals = _ordinals(artifact.column_members)
    return lookup(artifact, row_ordinals[row_member], column_ordinals[column_member])


__all__ = [
    "bytes_per_column_block",
    "get_bit_index",
    "compile_relation",
    "lookup",
    "lookup_members",
    "member_ordinals",
]
