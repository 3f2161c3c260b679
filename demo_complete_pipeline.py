#!/usr/bin/env python3
"""
Complete Pipeline Demo: CSV → Relation → Bitmap → Source

Shows the full workflow:
1. Parse the Animal/Color map document
2. Compile it into a packed bitmap
3. Analyze and verify every cell
4. Generate Python and C# source
"""

from relbitmap.csv_parser import parse_relation_string
from relbitmap.compiler import compile_relation, lookup_members
from relbitmap.analyzer import analyze_artifact
from relbitmap.backends import generate_source, save_source_file, SourceMode
from relbitmap.examples import ANIMAL_COLOR_CSV


def main():
    print("=" * 80)
    print("COMPLETE PIPELINE DEMO: CSV → Relation → Bitmap → Source")
    print("=" * 80)

    # =========================================================================
    # STEP 1: Parse CSV
    # =========================================================================
    print("\n1. PARSING CSV...")
    result = parse_relation_string(ANIMAL_COLOR_CSV, relation_name="Zoo.Maps.AnimalColor")
    for diagnostic in result.diagnostics:
        print(f"   ✗ {diagnostic}")
    relation = result.unwrap()
    print(f"   ✓ Domains: {relation.row_domain_name}/{relation.column_domain_name}")
    print(f"   ✓ Rows: {relation.row_members}")
    print(f"   ✓ Columns: {relation.column_members}")
    print(f"   ✓ True cells: {sorted(relation.true_cells)}")

    # =========================================================================
    # STEP 2: Compile
    # =========================================================================
    print("\n2. COMPILING...")
    artifact = compile_relation(relation)
    print(f"   ✓ Bytes per column block: {artifact.bytes_per_column_block}")
    print(f"   ✓ Buffer: {artifact.buffer.hex()}")

    # =========================================================================
    # STEP 3: Analyze
    # =========================================================================
    print("\n3. ANALYZING...")
    report = analyze_artifact(artifact, relation)
    print(f"   ✓ Bits set: {report.bits_set}")
    print(f"   ✓ Density: {report.density:.1%}")
    print(f"   ✓ Verified: {report.verified}")
    for warning in report.warnings:
        print(f"      - {warning}")

    for row, column in [("Cat", "Green"), ("Dog", "Red"), ("Cat", "Blue")]:
        print(f"   lookup({row}, {column}) = {lookup_members(artifact, row, column)}")

    # =========================================================================
    # STEP 4: Generate Source
    # =========================================================================
    print("\n4. GENERATING SOURCE...")
    for mode, suffix in [(SourceMode.PYTHON, "py"), (SourceMode.CSHARP, "cs")]:
        filename = f"{artifact.simple_name}.{suffix}"
        save_source_file(artifact, filename, mode=mode)
        print(f"   ✓ Saved {filename}")

    print("\n" + "-" * 80)
    print(generate_source(artifact, mode=SourceMode.CSHARP))

    print("=" * 80)
    print("PIPELINE COMPLETE!")
    print("=" * 80)


if __name__ == "__main__":
    main()
