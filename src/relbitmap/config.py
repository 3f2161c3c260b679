"""
Manifest configuration for batch compilation.

A manifest is a YAML file naming the map documents to compile:

    maps:
      - path: maps/animal_color.csv
        relation_name: Zoo.Maps.AnimalColor
        file_type: Map
        file_format: Csv
    output:
      format: python
      directory: generated
    workers: 1

Only entries whose file_type is "Map" and file_format is "Csv" (any case)
and which carry a relation_name are compiled; other entries are skipped.
Relative paths resolve against the manifest's directory.
"""

import copy
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = {
    "maps": [],
    "output": {
        "format": "python",
        "directory": ".",
    },
    "workers": 1,
    "verify": False,
}


class ConfigError(Exception):
    """Raised when a manifest is structurally invalid."""
    pass


@dataclass
class MapEntry:
    """One map document to compile."""
    path: str
    relation_name: str
    file_type: str = "Map"
    file_format: str = "Csv"


@dataclass
class Manifest:
    """Loaded manifest with defaults applied."""
    maps: List[MapEntry] = field(default_factory=list)
    settings: Dict[str, Any] = field(default_factory=lambda: copy.deepcopy(DEFAULT_CONFIG))
    source: Optional[str] = None

    def get(self, path: str, default: Any = None) -> Any:
        """Get a setting by dot-notation path, e.g. "output.format"."""
        current = self.settings
        for part in path.split('.'):
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                return default
        return current


def _update_dict_recursive(target: Dict, source: Dict) -> None:
    """Recursively update a dictionary, preserving keys not in source."""
    for key, value in source.items():
        if key in target and isinstance(target[key], dict) and isinstance(value, dict):
            _update_dict_recursive(target[key], value)
        else:
            target[key] = value


def is_map_entry(entry: Dict[str, Any]) -> bool:
    """True if a raw manifest entry describes a compilable CSV map."""
    file_type = str(entry.get("file_type", "Map"))
    file_format = str(entry.get("file_format", "Csv"))
    return (
        file_type.casefold() == "map"
        and file_format.casefold() == "csv"
        and bool(entry.get("relation_name"))
        and bool(entry.get("path"))
    )


def manifest_from_dict(data: Dict[str, Any], base_dir: str = ".") -> Manifest:
    """Build a Manifest from already-parsed YAML data."""
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError("Manifest must be a mapping")

    manifest = Manifest()
    _update_dict_recursive(manifest.settings, data)

    raw_maps = manifest.settings.get("maps") or []
    if not isinstance(raw_maps, list):
        raise ConfigError("'maps' must be a list")

    for index, entry in enumerate(raw_maps):
        if not isinstance(entry, dict) or not is_map_entry(entry):
            logger.warning("Skipping manifest entry %d: not a CSV map with a relation_name", index)
            continue
        path = entry["path"]
        if not os.path.isabs(path):
            path = os.path.join(base_dir, path)
        manifest.maps.append(MapEntry(
            path=path,
            relation_name=entry["relation_name"],
            file_type=str(entry.get("file_type", "Map")),
            file_format=str(entry.get("file_format", "Csv")),
        ))

    return manifest


def load_manifest(manifest_file: str) -> Manifest:
    """
    Load a manifest from a YAML file.

    Raises:
        FileNotFoundError: If the manifest doesn't exist
        ConfigError: If the manifest is not valid YAML or has the wrong shape
    """
    if not os.path.exists(manifest_file):
        raise FileNotFoundError(f"Manifest not found: {manifest_file}")

    with open(manifest_file, 'r', encoding='utf-8') as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {manifest_file}: {e}") from e

    if not data:
        logger.warning("Empty manifest %s. Nothing to compile.", manifest_file)

    manifest = manifest_from_dict(data, base_dir=os.path.dirname(os.path.abspath(manifest_file)))
    manifest.source = manifest_file
    logger.info("Loaded %d map(s) from %s", len(manifest.maps), manifest_file)
    return manifest
