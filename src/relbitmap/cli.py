"""
Command-line entry point.

    relbitmap compile maps/animal_color.csv --name Zoo.Maps.AnimalColor --format python
    relbitmap manifest maps.yaml --verify

Diagnostics go to stderr; the exit status is 1 if any document produced one.
"""

import argparse
import logging
import os
import sys
from typing import List, Optional

from relbitmap.analyzer import analyze_artifact
from relbitmap.backends import SourceMode, save_source_file, write_artifact_file
from relbitmap.config import MapEntry, load_manifest
from relbitmap.model import PackedArtifact
from relbitmap.pipeline import CompileOutcome, compile_documents
from relbitmap.serialization import artifact_to_json, artifact_to_yaml

logger = logging.getLogger(__name__)

FORMATS = {
    "python": ".py",
    "csharp": ".cs",
    "binary": ".rbmp",
    "json": ".json",
    "yaml": ".yaml",
}


def output_path(artifact: PackedArtifact, output_format: str, directory: str) -> str:
    return os.path.join(directory, artifact.simple_name + FORMATS[output_format])


def write_output(artifact: PackedArtifact, output_format: str, directory: str) -> str:
    """Write an artifact in the requested format and return the file path."""
    os.makedirs(directory, exist_ok=True)
    filename = output_path(artifact, output_format, directory)

    if output_format == "python":
        save_source_file(artifact, filename, mode=SourceMode.PYTHON)
    elif output_format == "csharp":
        save_source_file(artifact, filename, mode=SourceMode.CSHARP)
    elif output_format == "binary":
        write_artifact_file(artifact, filename)
    else:
        text = artifact_to_json(artifact) if output_format == "json" else artifact_to_yaml(artifact)
        with open(filename, 'w', encoding='utf-8') as f:
            f.write(text)

    logger.info("Wrote %s", filename)
    return filename


def _report(outcomes: List[CompileOutcome], output_format: str, directory: str) -> int:
    status = 0
    written = {}
    for outcome in outcomes:
        if outcome.diagnostics:
            status = 1
            for diagnostic in outcome.diagnostics:
                print(diagnostic, file=sys.stderr)
            continue
        if outcome.skipped:
            continue
        filename = output_path(outcome.artifact, output_format, directory)
        if filename in written:
            status = 1
            print(
                f"{outcome.path}: {outcome.relation_name} would overwrite {filename} written for {written[filename]}",
                file=sys.stderr,
            )
            continue
        written[filename] = outcome.relation_name
        write_output(outcome.artifact, output_format, directory)
        for warning in analyze_artifact(outcome.artifact).warnings:
            logger.warning("%s: %s", outcome.relation_name, warning)
    return status


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="relbitmap", description="Compile CSV relation maps into packed bitmaps")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    compile_cmd = sub.add_parser("compile", help="Compile one or more CSV map documents")
    compile_cmd.add_argument("csv", nargs="+", help="Map documents")
    compile_cmd.add_argument("--name", help="Relation name (only with a single document; defaults to the file stem)")
    compile_cmd.add_argument("--format", choices=sorted(FORMATS), default="python")
    compile_cmd.add_argument("--output-dir", default=".")
    compile_cmd.add_argument("--verify", action="store_true", help="Check every cell after packing")
    compile_cmd.add_argument("--workers", type=int, default=1)

    manifest_cmd = sub.add_parser("manifest", help="Compile the maps listed in a YAML manifest")
    manifest_cmd.add_argument("manifest")
    manifest_cmd.add_argument("--format", choices=sorted(FORMATS))
    manifest_cmd.add_argument("--output-dir")
    manifest_cmd.add_argument("--verify", action="store_true")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='[%(levelname)s] %(message)s',
    )

    if args.command == "compile":
        if args.name and len(args.csv) > 1:
            print("--name requires a single document", file=sys.stderr)
            return 2
        entries = [
            MapEntry(path=path, relation_name=args.name or os.path.splitext(os.path.basename(path))[0])
            for path in args.csv
        ]
        outcomes = compile_documents(entries, workers=args.workers, verify=args.verify)
        return _report(outcomes, args.format, args.output_dir)

    manifest = load_manifest(args.manifest)
    output_format = args.format or manifest.get("output.format", "python")
    if output_format not in FORMATS:
        print(f"Unknown output format: {output_format}", file=sys.stderr)
        return 2
    directory = args.output_dir
    if directory is None:
        directory = os.path.join(os.path.dirname(os.path.abspath(args.manifest)), manifest.get("output.directory", "."))
    verify = args.verify or bool(manifest.get("verify", False))
    outcomes = compile_documents(manifest.maps, workers=int(manifest.get("workers", 1)), verify=verify)
    return _report(outcomes, output_format, directory)


if __name__ == "__main__":
    sys.exit(main())
