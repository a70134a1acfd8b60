"""
YAML data loader with schema validation.

Loads ecosystem presets, environmental event definitions, and simulation
configuration from YAML files and validates against JSON schemas.
"""

import yaml
import json
from pathlib import Path
from typing import Dict, Optional
import jsonschema

from .data_types import (
    EcosystemPreset, EventDefinition, EventEffect, EventRate, SpecialEffect,
    SimulationConfig, Catalog
)


# Catalog shipped with the package
DEFAULT_DATA_ROOT = Path(__file__).parent / "data"
DEFAULT_SCHEMA_DIR = DEFAULT_DATA_ROOT / "schemas"


class DataLoadError(Exception):
    """Raised when data loading or validation fails"""
    pass


def load_yaml(file_path: Path) -> dict:
    """Load YAML file and return parsed dict"""
    file_path = Path(file_path)
    if not file_path.exists():
        raise DataLoadError(f"File not found: {file_path}")

    try:
        with open(file_path, 'r') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise DataLoadError(f"YAML parse error in {file_path}: {e}")

    if not isinstance(data, dict):
        raise DataLoadError(f"Expected a mapping at top level of {file_path}")
    return data


def validate_against_schema(data: dict, schema_path: Path, data_path: Path):
    """Validate data dict against JSON schema"""
    if not schema_path.exists():
        # Schema validation optional for custom data packs
        return

    try:
        with open(schema_path, 'r') as f:
            schema = json.load(f)
        jsonschema.validate(instance=data, schema=schema)
    except jsonschema.ValidationError as e:
        raise DataLoadError(f"Validation error in {data_path}: {e.message}")
    except json.JSONDecodeError as e:
        raise DataLoadError(f"Invalid JSON schema {schema_path}: {e}")


def load_presets(file_path: Path, schema_dir: Optional[Path] = None) -> Dict[str, EcosystemPreset]:
    """Load ecosystem presets from YAML"""
    data = load_yaml(file_path)

    if schema_dir:
        validate_against_schema(data, Path(schema_dir) / "ecosystem.schema.json", file_path)

    presets = {}
    for preset_data in data['presets']:
        preset = EcosystemPreset(
            preset_id=preset_data['preset_id'],
            name=preset_data['name'],
            temperature=float(preset_data['temperature']),
            moisture=float(preset_data['moisture']),
            resources=float(preset_data['resources']),
            description=preset_data.get('description')
        )
        if preset.preset_id in presets:
            raise DataLoadError(f"Duplicate preset_id '{preset.preset_id}' in {file_path}")
        presets[preset.preset_id] = preset

    return presets


def load_event_definitions(file_path: Path, schema_dir: Optional[Path] = None) -> Dict[str, EventDefinition]:
    """Load environmental event definitions from YAML"""
    data = load_yaml(file_path)

    if schema_dir:
        validate_against_schema(data, Path(schema_dir) / "event.schema.json", file_path)

    events = {}
    for event_data in data['events']:
        effect_data = event_data.get('effect', {})
        try:
            definition = EventDefinition(
                event_id=event_data['event_id'],
                name=event_data['name'],
                description=event_data.get('description', ''),
                effect=EventEffect(
                    temperature=float(effect_data.get('temperature', 0.0)),
                    moisture=float(effect_data.get('moisture', 0.0)),
                    resources=float(effect_data.get('resources', 0.0))
                ),
                rate=EventRate(event_data['rate']),
                duration=int(event_data['duration']),
                special=SpecialEffect(event_data.get('special', 'none'))
            )
        except ValueError as e:
            raise DataLoadError(f"Invalid event in {file_path}: {e}")

        if definition.event_id in events:
            raise DataLoadError(f"Duplicate event_id '{definition.event_id}' in {file_path}")
        events[definition.event_id] = definition

    return events


def load_simulation_config(file_path: Path, schema_dir: Optional[Path] = None) -> SimulationConfig:
    """Load simulation configuration from YAML"""
    data = load_yaml(file_path)

    if schema_dir:
        validate_against_schema(data, Path(schema_dir) / "simulation.schema.json", file_path)

    try:
        return SimulationConfig(**data.get('simulation', {}))
    except TypeError as e:
        raise DataLoadError(f"Invalid simulation config in {file_path}: {e}")


def load_all_data(data_root: Optional[Path] = None, schema_dir: Optional[Path] = None) -> Catalog:
    """Load the complete catalog from a data directory

    Expects ecosystems.yaml and events.yaml; simulation.yaml is optional.
    With no arguments, loads and validates the packaged catalog.
    """
    if data_root is None:
        data_root = DEFAULT_DATA_ROOT
        if schema_dir is None:
            schema_dir = DEFAULT_SCHEMA_DIR
    data_root = Path(data_root)

    presets = load_presets(data_root / "ecosystems.yaml", schema_dir)
    events = load_event_definitions(data_root / "events.yaml", schema_dir)

    simulation_file = data_root / "simulation.yaml"
    if simulation_file.exists():
        simulation = load_simulation_config(simulation_file, schema_dir)
    else:
        simulation = SimulationConfig()

    if simulation.default_preset not in presets:
        raise DataLoadError(
            f"default_preset '{simulation.default_preset}' not found in {data_root / 'ecosystems.yaml'}"
        )

    return Catalog(presets=presets, events=events, simulation=simulation)
