"""
Test data loading system.

Verifies YAML -> Python dataclass conversion and schema validation.
"""

import pytest
from pathlib import Path

from speciation.loader import (
    load_presets, load_event_definitions, load_simulation_config,
    load_all_data, DataLoadError, DEFAULT_DATA_ROOT, DEFAULT_SCHEMA_DIR
)
from speciation.data_types import EventRate, SpecialEffect, SimulationConfig


def test_load_presets():
    """Test loading the ecosystem preset catalog"""
    presets = load_presets(DEFAULT_DATA_ROOT / "ecosystems.yaml", DEFAULT_SCHEMA_DIR)

    print(f"[OK] Loaded {len(presets)} presets: {', '.join(presets)}")

    assert set(presets) == {'temperate', 'tropical', 'arid', 'tundra', 'aquatic'}

    temperate = presets['temperate']
    assert temperate.name == "Temperate Forest"
    assert (temperate.temperature, temperate.moisture, temperate.resources) == (15.0, 70.0, 80.0)

    tundra = presets['tundra']
    assert tundra.temperature == -5.0


def test_load_events():
    """Test loading environmental event definitions"""
    events = load_event_definitions(DEFAULT_DATA_ROOT / "events.yaml", DEFAULT_SCHEMA_DIR)

    print(f"[OK] Loaded {len(events)} events:")
    for event_id, definition in events.items():
        print(f"  - {event_id}: {definition.rate.value}, duration={definition.duration}")

    assert len(events) == 8

    flood = events['flood']
    assert flood.rate is EventRate.RAPID
    assert flood.duration == 4
    assert flood.effect.moisture == 40.0
    assert flood.rate_factor == 1.0

    drought = events['drought']
    assert drought.rate is EventRate.GRADUAL
    assert drought.rate_factor == pytest.approx(1.0 / 8)

    # Missing effect fields default to zero
    invasive = events['invasive']
    assert invasive.effect.temperature == 0.0
    assert invasive.effect.resources == -35.0

    # Only the barrier carries a special
    specials = {e.event_id: e.special for e in events.values() if e.special is not SpecialEffect.NONE}
    assert specials == {'barrier': SpecialEffect.SPLIT}


def test_load_simulation_config():
    """Test simulation tunables match constants defaults"""
    config = load_simulation_config(DEFAULT_DATA_ROOT / "simulation.yaml", DEFAULT_SCHEMA_DIR)

    assert config == SimulationConfig()
    assert config.max_alive_species == 10
    assert config.max_population == 120


def test_load_all():
    """Test loading the packaged catalog"""
    catalog = load_all_data()

    print(f"[OK] Catalog: {len(catalog.presets)} presets, {len(catalog.events)} events, "
          f"default preset={catalog.simulation.default_preset}")

    assert catalog.simulation.default_preset in catalog.presets
    assert 'barrier' in catalog.events


def test_missing_file(tmp_path: Path):
    with pytest.raises(DataLoadError, match="File not found"):
        load_presets(tmp_path / "nope.yaml")


def test_malformed_yaml(tmp_path: Path):
    bad = tmp_path / "ecosystems.yaml"
    bad.write_text("presets: [unclosed\n")

    with pytest.raises(DataLoadError, match="YAML parse error"):
        load_presets(bad)


def test_schema_rejects_unknown_rate(tmp_path: Path):
    bad = tmp_path / "events.yaml"
    bad.write_text(
        "events:\n"
        "  - event_id: meteor\n"
        "    name: Meteor\n"
        "    effect: {temperature: -20}\n"
        "    rate: sudden\n"
        "    duration: 3\n"
    )

    with pytest.raises(DataLoadError, match="Validation error"):
        load_event_definitions(bad, DEFAULT_SCHEMA_DIR)

    # Without schemas the enum conversion still rejects it
    with pytest.raises(DataLoadError, match="Invalid event"):
        load_event_definitions(bad)


def test_schema_rejects_out_of_range_moisture(tmp_path: Path):
    bad = tmp_path / "ecosystems.yaml"
    bad.write_text(
        "presets:\n"
        "  - preset_id: swamp\n"
        "    name: Swamp\n"
        "    temperature: 22\n"
        "    moisture: 140\n"
        "    resources: 60\n"
    )

    with pytest.raises(DataLoadError, match="Validation error"):
        load_presets(bad, DEFAULT_SCHEMA_DIR)


def test_duplicate_event_ids(tmp_path: Path):
    bad = tmp_path / "events.yaml"
    bad.write_text(
        "events:\n"
        "  - {event_id: heat, name: Heat, effect: {temperature: 2}, rate: rapid, duration: 2}\n"
        "  - {event_id: heat, name: Heat again, effect: {temperature: 3}, rate: rapid, duration: 2}\n"
    )

    with pytest.raises(DataLoadError, match="Duplicate event_id"):
        load_event_definitions(bad)


def test_custom_data_root_without_simulation_file(tmp_path: Path):
    """simulation.yaml is optional; defaults come from constants"""
    (tmp_path / "ecosystems.yaml").write_text(
        "presets:\n"
        "  - {preset_id: temperate, name: Custom Forest, temperature: 10, moisture: 60, resources: 50}\n"
    )
    (tmp_path / "events.yaml").write_text(
        "events:\n"
        "  - {event_id: frost, name: Frost, effect: {temperature: -6}, rate: gradual, duration: 3}\n"
    )

    catalog = load_all_data(tmp_path)

    assert catalog.simulation == SimulationConfig()
    assert catalog.presets['temperate'].name == "Custom Forest"
    assert catalog.events['frost'].special is SpecialEffect.NONE


def test_custom_data_root_missing_default_preset(tmp_path: Path):
    (tmp_path / "ecosystems.yaml").write_text(
        "presets:\n"
        "  - {preset_id: swamp, name: Swamp, temperature: 22, moisture: 90, resources: 60}\n"
    )
    (tmp_path / "events.yaml").write_text(
        "events:\n"
        "  - {event_id: frost, name: Frost, effect: {temperature: -6}, rate: gradual, duration: 3}\n"
    )

    with pytest.raises(DataLoadError, match="default_preset"):
        load_all_data(tmp_path)
