"""
Source text generator for packed relation bitmaps.

Renders a PackedArtifact as a self-contained module embedding the map
literal and an inlined lookup function.

Supports multiple modes:
    - PYTHON: module with ROW_COUNT, member tuples and lookup(row, column)
    - CSHARP: internal sealed class with a ReadOnlySpan<byte> map and Lookup
"""

from enum import Enum
from typing import List

from relbitmap.model import PackedArtifact, split_type_name


class SourceMode(Enum):
    """Target languages for generated source."""
    PYTHON = "python"
    CSHARP = "csharp"


def _format_map_lines(artifact: PackedArtifact) -> List[str]:
    """One line of hex literals per column block."""
    block = artifact.bytes_per_column_block
    lines = []
    if block == 0:
        return lines
    for start in range(0, len(artifact.buffer), block):
        chunk = artifact.buffer[start:start + block]
        lines.append(", ".join(f"0x{b:02X}" for b in chunk))
    return lines


def _generate_python(artifact: PackedArtifact) -> str:
    lines = []
    lines.append('"""Generated relation lookup table. Do not edit."""')
    lines.append("")
    lines.append(f"RELATION_NAME = {artifact.relation_name!r}")
    lines.append(f"ROW_DOMAIN = {artifact.row_domain_name!r}")
    lines.append(f"COLUMN_DOMAIN = {artifact.column_domain_name!r}")
    lines.append(f"ROW_COUNT = {artifact.row_count:d}")
    lines.append(f"COLUMN_COUNT = {artifact.column_count:d}")
    lines.append(f"ROW_MEMBERS = {tuple(artifact.row_members)!r}")
    lines.append(f"COLUMN_MEMBERS = {tuple(artifact.column_members)!r}")
    lines.append("")
    lines.append("_MAP = bytes((")
    for map_line in _format_map_lines(artifact):
        lines.append(f"    {map_line},")
    lines.append("))")
    lines.append("")
    lines.append("")
    lines.append("def lookup(row, column):")
    lines.append("    offset = int(row) + int(column) * ROW_COUNT")
    lines.append("    return (_MAP[offset >> 3] >> (offset & 7)) & 1 == 1")
    lines.append("")
    return "\n".join(lines)


def _generate_csharp(artifact: PackedArtifact) -> str:
    namespace, class_name = split_type_name(artifact.relation_name)
    row_namespace, row_type = split_type_name(artifact.row_domain_name)
    column_namespace, column_type = split_type_name(artifact.column_domain_name)

    usings = sorted({"System", row_namespace, column_namespace})

    lines = []
    for name in usings:
        lines.append(f"using {name};")
    lines.append("")
    lines.append(f"namespace {namespace}")
    lines.append("{")
    lines.append(f"    internal sealed class {class_name}")
    lines.append("    {")
    lines.append(f"        private const int RowCount = {artifact.row_count:d};")
    lines.append("")
    lines.append("        private static ReadOnlySpan<byte> _map => new ReadOnlySpan<byte>(new byte[]")
    lines.append("            {")
    map_lines = _format_map_lines(artifact)
    for index, map_line in enumerate(map_lines):
        separator = "," if index < len(map_lines) - 1 else ""
        lines.append(f"                {map_line}{separator}")
    lines.append("            }")
    lines.append("        );")
    lines.append("")
    lines.append(f"        internal static bool Lookup({row_type} row, {column_type} column)")
    lines.append("        {")
    lines.append("            int offset = (int)row + ((int)column * RowCount);")
    lines.append("            int byteIndex = (int)((uint)offset / 8);")
    lines.append("            int bitIndex = offset & (8 - 1);")
    lines.append("            return (_map[byteIndex] & (1 << bitIndex)) != 0;")
    lines.append("        }")
    lines.append("    }")
    lines.append("}")
    lines.append("")
    return "\n".join(lines)


def generate_source(artifact: PackedArtifact, mode: SourceMode = SourceMode.PYTHON) -> str:
    """
    Generate source text for an artifact.

    Args:
        artifact: Compiled relation
        mode: Target language

    Returns:
        String containing the generated module
    """
    if mode == SourceMode.CSHARP:
        return _generate_csharp(artifact)
    return _generate_python(artifact)


def save_source_file(artifact: PackedArtifact, filename: str, mode: SourceMode = SourceMode.PYTHON) -> None:
    """
    Generate source and save to file.

    Args:
        artifact: Compiled relation
        filename: Output file path (.py or .cs recommended)
        mode: Target language
    """
    source = generate_source(artifact, mode=mode)
    with open(filename, 'w', encoding='utf-8') as f:
        f.write(source)


__all__ = ["SourceMode", "generate_source", "save_source_file"]
