"""
Tests for the event engine: triggering, duplicate rejection, decay, split.
"""

import numpy as np

from speciation.events import EventEngine
from speciation.species import SpeciesRegistry
from speciation.event_log import EventLog, LogKind
from speciation.loader import load_all_data
from speciation.rng import RandomSource
from speciation.tests.harness import ScriptedRandom, uniform_traits


def _engine(rng=None):
    registry = SpeciesRegistry()
    log = EventLog()
    engine = EventEngine(registry, rng or RandomSource(3), log)
    return engine, registry, log


def test_trigger_activates_with_full_duration():
    catalog = load_all_data()
    engine, _, log = _engine()

    active = engine.trigger(catalog.events['drought'], generation=4)

    assert active is not None
    assert active.remaining_ticks == 8
    assert active.generation_triggered == 4
    assert engine.active_ids() == ['drought']

    entry = log.tail(1)[0]
    assert entry.kind is LogKind.EVENT
    assert entry.generation == 4
    assert entry.message.startswith("Severe Drought:")


def test_duplicate_trigger_rejected():
    catalog = load_all_data()
    engine, _, log = _engine()

    first = engine.trigger(catalog.events['flood'], generation=0)
    second = engine.trigger(catalog.events['flood'], generation=0)

    assert first is not None
    assert second is None
    assert engine.active_ids() == ['flood']
    assert len(log) == 1


def test_distinct_events_coexist():
    catalog = load_all_data()
    engine, _, _ = _engine()

    engine.trigger(catalog.events['flood'], generation=0)
    engine.trigger(catalog.events['invasive'], generation=0)

    assert engine.active_ids() == ['flood', 'invasive']


def test_decay_removes_expired():
    catalog = load_all_data()
    engine, _, _ = _engine()
    engine.trigger(catalog.events['flood'], generation=0)  # duration 4

    for expected_remaining in (3, 2, 1):
        engine.decay()
        assert engine.active[0].remaining_ticks == expected_remaining

    engine.decay()
    assert engine.active == []
    assert not engine.is_active('flood')

    # Retriggering after expiry is allowed
    assert engine.trigger(catalog.events['flood'], generation=5) is not None


def test_split_single_species():
    """Barrier on one species of 50: 30 stay, 20 leave with identical traits"""
    catalog = load_all_data()
    engine, registry, log = _engine()
    parent = registry.create("Verdalis", np.array([10.0, 20.0, 30.0, 40.0, 50.0]), 50, generation=0)

    active = engine.trigger(catalog.events['barrier'], generation=3)

    assert registry.alive_count() == 2
    child = registry.get(active.split_child_id)
    assert child.parent_id == parent.species_id
    assert child.species_id == 1
    assert child.population == 20
    assert parent.population == 30
    assert child.generation_born == 3
    assert np.array_equal(child.traits, parent.traits)
    assert child.traits is not parent.traits

    kinds = [e.kind for e in log]
    assert kinds == [LogKind.EVENT, LogKind.SPLIT]


def test_split_without_candidate_is_noop():
    """Event still activates when no species exceeds population 20"""
    catalog = load_all_data()
    engine, registry, log = _engine()
    registry.create("Smallus", uniform_traits(), 20, generation=0)

    active = engine.trigger(catalog.events['barrier'], generation=0)

    assert active is not None
    assert active.split_child_id is None
    assert engine.is_active('barrier')
    assert len(registry) == 1
    assert registry.get(0).population == 20
    assert [e.kind for e in log] == [LogKind.EVENT]


def test_split_picks_among_eligible_only():
    catalog = load_all_data()
    engine, registry, _ = _engine(ScriptedRandom(integer_value=1))
    a = registry.create("A", uniform_traits(), 30, generation=0)
    registry.create("B", uniform_traits(), 10, generation=0)
    c = registry.create("C", uniform_traits(), 40, generation=0)

    active = engine.trigger(catalog.events['barrier'], generation=0)

    child = registry.get(active.split_child_id)
    assert child.parent_id == c.species_id
    assert c.population + child.population == 40
    assert a.population == 30


def test_split_ignores_extinct_species():
    catalog = load_all_data()
    engine, registry, _ = _engine()
    gone = registry.create("Gone", uniform_traits(), 90, generation=0)
    registry.mark_extinct(gone, generation=1)

    active = engine.trigger(catalog.events['barrier'], generation=2)

    assert active.split_child_id is None
    assert len(registry) == 1


def test_clear():
    catalog = load_all_data()
    engine, _, _ = _engine()
    engine.trigger(catalog.events['climate'], generation=0)

    engine.clear()

    assert engine.active == []
