"""
Speciation simulation kernel.

SpeciationSimulation is the run aggregate: it owns the environment, species
registry, event engine, diversity history and event log, and exposes the
command interface used by presentation layers (initialize, tick,
trigger_event, reset, get_snapshot).
"""

import time
from collections import deque
from pathlib import Path
from typing import List, Optional

from .data_types import Catalog, EcosystemPreset, EventDefinition, SimulationConfig
from .environment import Environment
from .species import SpeciesRegistry, Species
from .events import EventEngine, ActiveEvent
from .population import PopulationEngine
from .event_log import EventLog, LogKind
from .loader import load_all_data
from .rng import RandomSource, make_seed
from .constants import TICK_TIME_WINDOW


class UnknownPresetError(KeyError):
    """Raised when a preset id is not in the catalog"""
    pass


class UnknownEventError(KeyError):
    """Raised when an event id is not in the catalog"""
    pass


class SpeciationSimulation:
    """
    Main simulation class for one run.

    All state lives on the instance; independent runs may coexist. Methods
    are not reentrant: callers serialize initialize/tick/trigger_event/reset.
    """

    def __init__(
        self,
        preset_id: Optional[str] = None,
        seed: Optional[int] = None,
        random_source: Optional[RandomSource] = None,
        config: Optional[SimulationConfig] = None,
        catalog: Optional[Catalog] = None,
        data_root: Optional[Path] = None,
        verbose: bool = True
    ):
        """
        Initialize simulation from the data catalog.

        Args:
            preset_id: Ecosystem preset (defaults to config.default_preset)
            seed: Base seed; the run seed is derived from (seed, preset_id)
            random_source: Injected random source (overrides seed)
            config: Simulation tunables (defaults to the catalog's)
            catalog: Preloaded catalog (skips loading data_root)
            data_root: Optional path to a custom data directory
            verbose: Print initialize and total-extinction lines to console
        """
        self.verbose = verbose

        if catalog is None:
            if verbose:
                print("Loading data catalog...")
            catalog = load_all_data(data_root)

        self.catalog: Catalog = catalog
        self.config: SimulationConfig = config or catalog.simulation
        self.seed = seed
        self._injected_rng = random_source

        preset_id = preset_id or self.config.default_preset
        self.preset: EcosystemPreset = self._lookup_preset(preset_id)

        # Performance metrics
        self._tick_times: deque = deque(maxlen=TICK_TIME_WINDOW)

        # Run state: environment, registry, engines, histories, log
        self.initialize(preset_id)

    # ------------------------------------------------------------------
    # Command interface
    # ------------------------------------------------------------------

    def initialize(self, preset_id: Optional[str] = None) -> dict:
        """
        Reset all run state to generation 0 with a single founder.

        Args:
            preset_id: Preset to use (defaults to the current preset)

        Returns:
            Snapshot dict
        """
        if preset_id is not None and preset_id != self.preset.preset_id:
            self.preset = self._lookup_preset(preset_id)

        # Seeded streams restart on every initialize and reset
        self.rng: RandomSource = self._make_rng(self.preset.preset_id)

        self.generation: int = 0
        self.environment: Environment = Environment.from_preset(self.preset)
        self.log = EventLog(self.config.event_log_capacity)
        self.registry = SpeciesRegistry(self.config.max_population, self.config.history_window)
        self.events = EventEngine(self.registry, self.rng, self.log)
        self.population = PopulationEngine(self.registry, self.rng, self.log, self.config)
        self.diversity_history: deque = deque(maxlen=self.config.history_window)
        self.total_speciated: int = 0
        self.total_extinct: int = 0
        self._total_extinction_logged: bool = False
        self._tick_times.clear()

        founder = self.registry.create_founder(self.rng, self.generation, self.config.founder_population)
        self.diversity_history.append(self.registry.alive_count())

        if self.verbose:
            print(f"[OK] Simulation initialized: {self.preset.name} "
                  f"(T={self.preset.temperature:.1f}, M={self.preset.moisture:.1f}, "
                  f"R={self.preset.resources:.1f}), founder {founder.name} pop={founder.population}")

        return self.get_snapshot()

    def reset(self) -> dict:
        """Discard all state; equivalent to initialize() with the current preset"""
        return self.initialize(self.preset.preset_id)

    def trigger_event(self, event_id: str) -> Optional[ActiveEvent]:
        """
        Activate an event from the catalog.

        Returns:
            The ActiveEvent, or None if that event was already active
        """
        definition = self._lookup_event(event_id)
        active = self.events.trigger(definition, self.generation)
        if active is not None and active.split_child_id is not None:
            self.total_speciated += 1
        return active

    def tick(self) -> dict:
        """
        Advance simulation by one generation.

        Order within a tick:
        1. Generation counter += 1
        2. Environment: active event effects, then baseline reversion
        3. Event decay (expired events removed)
        4. Population engine for every species alive at tick start;
           species born during this tick do not act until the next one
        5. Diversity history += alive count
        6. Total extinction logged once, on the transition to zero alive

        Returns:
            Snapshot dict
        """
        start_time = time.perf_counter()

        self.generation += 1

        self.environment.apply_event_effects(self.events.active)
        self.environment.revive_toward_baseline(self.preset)
        self.events.decay()

        acting = self.registry.alive()
        newborn: List[Species] = []
        for species in acting:
            child = self.population.advance(species, self.environment, self.generation)
            if not species.alive:
                self.total_extinct += 1
            if child is not None:
                newborn.append(child)
        self.total_speciated += len(newborn)

        alive_count = self.registry.alive_count()
        self.diversity_history.append(alive_count)

        if alive_count == 0 and not self._total_extinction_logged:
            self._total_extinction_logged = True
            self.log.append(self.generation, "TOTAL EXTINCTION - All species have perished.",
                            LogKind.TOTAL_EXTINCTION)
            if self.verbose:
                print(f"[EXTINCT] Total extinction at generation {self.generation}")

        self._tick_times.append(time.perf_counter() - start_time)
        return self.get_snapshot()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def available_presets(self) -> List[str]:
        return list(self.catalog.presets.keys())

    @property
    def available_events(self) -> List[str]:
        return list(self.catalog.events.keys())

    def alive_species(self) -> List[Species]:
        return self.registry.alive()

    def get_snapshot(self) -> dict:
        """
        Get complete run state snapshot (plain data, safe to serialize).

        Returns:
            Dict with generation, environment, species (including extinct),
            diversity history, event log tail, active events and totals
        """
        return {
            'generation': self.generation,
            'preset': self.preset.to_dict(),
            'environment': self.environment.to_dict(),
            'species': [sp.to_dict() for sp in self.registry],
            'alive_count': self.registry.alive_count(),
            'total_population': self.registry.total_population(),
            'diversity_history': list(self.diversity_history),
            'event_log': [e.to_dict() for e in self.log.tail(self.config.event_log_tail)],
            'active_events': [a.to_dict() for a in self.events.active],
            'total_speciated': self.total_speciated,
            'total_extinct': self.total_extinct,
            'timing': self.get_tick_stats(),
        }

    def get_tick_stats(self) -> dict:
        """
        Get current tick timing statistics.

        Returns:
            Dict with tick_count, avg_tick_time_ms, last_tick_time_ms
        """
        if not self._tick_times:
            return {
                'tick_count': self.generation,
                'avg_tick_time_ms': 0.0,
                'last_tick_time_ms': 0.0
            }

        return {
            'tick_count': self.generation,
            'avg_tick_time_ms': sum(self._tick_times) / len(self._tick_times) * 1000.0,
            'last_tick_time_ms': self._tick_times[-1] * 1000.0
        }

    def print_tick_summary(self):
        """Print tick summary to console (lightweight monitoring)"""
        stats = self.get_tick_stats()
        env = self.environment
        print(f"Gen {self.generation:5d} | "
              f"T={env.temperature:6.2f} M={env.moisture:6.2f} R={env.resources:6.2f} | "
              f"Alive: {self.registry.alive_count():2d} | "
              f"Pop: {self.registry.total_population():4d} | "
              f"Events: {','.join(self.events.active_ids()) or '-'} | "
              f"Avg: {stats['avg_tick_time_ms']:6.3f} ms")

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _lookup_preset(self, preset_id: str) -> EcosystemPreset:
        try:
            return self.catalog.presets[preset_id]
        except KeyError:
            raise UnknownPresetError(
                f"Unknown preset '{preset_id}' (available: {', '.join(self.catalog.presets)})"
            ) from None

    def _lookup_event(self, event_id: str) -> EventDefinition:
        try:
            return self.catalog.events[event_id]
        except KeyError:
            raise UnknownEventError(
                f"Unknown event '{event_id}' (available: {', '.join(self.catalog.events)})"
            ) from None

    def _make_rng(self, preset_id: str) -> RandomSource:
        if self._injected_rng is not None:
            return self._injected_rng
        if self.seed is None:
            return RandomSource()
        return RandomSource(make_seed(self.seed, preset_id))
