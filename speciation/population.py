"""
Population engine: one generation of growth, extinction, speciation and
trait drift for a single living species.

Per-species update order:
1. Fitness from the tick's post-update environment
2. Growth: growth_rate = (fitness - 45) / 200, plus Gaussian noise (sd 3)
3. Soft cap pressure above 80% of max_population
4. Round (half up), floor at 0, cap at max_population, record history
5. Extinction at zero population (terminal)
6. Speciation (survivors only, probabilistic, bounded by max_alive_species)
7. Trait drift (sd 0.5) on every survivor
"""

import math
from typing import Optional

from .data_types import SimulationConfig
from .species import Species, SpeciesRegistry, generate_species_name, clamp_traits
from .event_log import EventLog, LogKind
from .fitness import compute_fitness
from .rng import RandomSource
from .constants import (
    TRAIT_COUNT,
    GROWTH_NEUTRAL_FITNESS,
    GROWTH_RATE_DIVISOR,
    DEMOGRAPHIC_NOISE_SCALE,
    CAP_PRESSURE_THRESHOLD,
    CAP_PRESSURE_STRENGTH,
    SPECIATION_MIN_POPULATION,
    SPECIATION_MIN_FITNESS,
    SPECIATION_CHILD_FRACTION,
    INHERITANCE_NOISE_SCALE,
    TRAIT_DRIFT_SCALE,
)


def round_half_up(value: float) -> int:
    """Round to nearest integer, ties toward +inf"""
    return int(math.floor(value + 0.5))


def growth_rate(fitness: float) -> float:
    """Per-generation growth fraction; zero at fitness 45"""
    return (fitness - GROWTH_NEUTRAL_FITNESS) / GROWTH_RATE_DIVISOR


def cap_pressure(population: int, max_population: int) -> float:
    """Density-dependent damping, non-zero above 80% of max_population"""
    threshold = max_population * CAP_PRESSURE_THRESHOLD
    if population <= threshold:
        return 0.0
    return -((population - threshold) / max_population) * CAP_PRESSURE_STRENGTH


class PopulationEngine:
    """Advances species one generation at a time"""

    def __init__(self, registry: SpeciesRegistry, rng: RandomSource, log: EventLog,
                 config: Optional[SimulationConfig] = None):
        self.registry = registry
        self.rng = rng
        self.log = log
        self.config = config or SimulationConfig()

    def advance(self, species: Species, environment, generation: int) -> Optional[Species]:
        """
        Run one generation for a living species.

        Args:
            species: Living species (extinct species are left untouched)
            environment: Post-update environment for this tick
            generation: Current generation

        Returns:
            Child species if speciation occurred, else None
        """
        if not species.alive:
            return None

        species.fitness = compute_fitness(species.traits, environment)
        species.population = self._next_population(species)
        species.record_population()

        if species.population == 0:
            self.registry.mark_extinct(species, generation)
            self.log.append(generation, f"{species.name} has gone extinct!", LogKind.EXTINCTION)
            return None

        child = None
        if self._should_speciate(species):
            child = self._speciate(species, generation)

        self._drift_traits(species)
        species.check_invariants()
        return child

    def _next_population(self, species: Species) -> int:
        max_population = self.config.max_population
        current = species.population

        noise = self.rng.normal(DEMOGRAPHIC_NOISE_SCALE)
        raw = current + current * growth_rate(species.fitness) + noise + cap_pressure(current, max_population)
        population = min(max(round_half_up(raw), 0), max_population)

        assert 0 <= population <= max_population, f"Population {population} out of range for species {species.species_id}"
        return population

    def _should_speciate(self, species: Species) -> bool:
        """
        All conditions must hold; the uniform draw is taken only when earlier ones pass.

        The alive-species ceiling counts children born earlier in the same
        tick, not only species alive at tick start, so a tick never
        overshoots it.
        """
        if species.population <= SPECIATION_MIN_POPULATION:
            return False
        if species.fitness <= SPECIATION_MIN_FITNESS:
            return False
        if self.rng.uniform() >= self.config.speciation_probability:
            return False
        return self.registry.alive_count() < self.config.max_alive_species

    def _speciate(self, parent: Species, generation: int) -> Species:
        """Branch parent; child inherits traits with sd-15 noise per trait"""
        child_traits = clamp_traits(parent.traits + self.rng.normal(INHERITANCE_NOISE_SCALE, size=TRAIT_COUNT))
        child = self.registry.branch(
            parent,
            child_fraction=SPECIATION_CHILD_FRACTION,
            child_traits=child_traits,
            name=generate_species_name(self.rng),
            generation=generation
        )
        self.log.append(generation, f"Speciation! {parent.name} -> {child.name}", LogKind.SPECIATION)
        return child

    def _drift_traits(self, species: Species):
        species.traits = clamp_traits(species.traits + self.rng.normal(TRAIT_DRIFT_SCALE, size=TRAIT_COUNT))
