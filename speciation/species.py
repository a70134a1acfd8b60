"""
Species runtime representation and registry.

Species are created once (founder, speciation, or split) and never deleted:
extinct species stay in the registry with alive=False so lineage and history
remain available to consumers.
"""

import math
import numpy as np
from collections import deque
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional

from .rng import RandomSource
from .constants import (
    TRAIT_NAMES,
    TRAIT_COUNT,
    TRAIT_MIN,
    TRAIT_MAX,
    FOUNDER_TRAIT_LOW,
    FOUNDER_TRAIT_HIGH,
    FITNESS_INITIAL,
    HISTORY_WINDOW,
    MAX_POPULATION,
    FOUNDER_POPULATION,
)


# Syllables for opaque display names
NAME_PREFIXES = [
    "Avi", "Flor", "Herb", "Sylv", "Aqua", "Terr", "Nox", "Lum",
    "Cryo", "Igni", "Verd", "Aur", "Umbr", "Zyg", "Morph",
]
NAME_SUFFIXES = [
    "alis", "opus", "ensis", "idae", "odon", "urus", "ella", "aria",
    "ipes", "ornis", "actyl", "ophis", "anth", "mera", "cola",
]


def generate_species_name(rng: RandomSource) -> str:
    """Random genus-like display name (not guaranteed unique)"""
    return NAME_PREFIXES[rng.integers(len(NAME_PREFIXES))] + NAME_SUFFIXES[rng.integers(len(NAME_SUFFIXES))]


def clamp_traits(traits) -> np.ndarray:
    """Return traits as float64 (5,) array clipped to [0, 100]"""
    arr = np.asarray(traits, dtype=np.float64)
    return np.clip(arr, TRAIT_MIN, TRAIT_MAX)


@dataclass
class Species:
    """
    Runtime species in simulation.

    Attributes:
        species_id: Unique monotonically increasing id (never reused)
        name: Display name
        traits: (5,) float64 array ordered as TRAIT_NAMES, each in [0, 100]
        population: Individuals, 0..max_population
        generation_born: Generation at which the species appeared
        parent_id: Parent species id (None for the founder)
        fitness: Last computed fitness (5-95)
        alive: False once extinct (terminal)
        generation_extinct: Generation of extinction (None while alive)
        population_history: Bounded population samples, oldest dropped first
        history_window: Capacity of population_history
    """
    species_id: int
    name: str
    traits: np.ndarray
    population: int
    generation_born: int
    parent_id: Optional[int] = None
    fitness: float = FITNESS_INITIAL
    alive: bool = True
    generation_extinct: Optional[int] = None
    population_history: deque = None
    history_window: int = HISTORY_WINDOW

    def __post_init__(self):
        """Normalize traits and history, check lifecycle invariant"""
        self.traits = clamp_traits(self.traits)
        assert self.traits.shape == (TRAIT_COUNT,), f"Expected {TRAIT_COUNT} traits, got {self.traits.shape}"

        if self.population_history is None:
            self.population_history = deque([self.population], maxlen=self.history_window)
        else:
            self.population_history = deque(self.population_history, maxlen=self.history_window)

        self.check_invariants()

    def trait(self, name: str) -> float:
        """Get trait value by name (e.g., 'camouflage')"""
        return float(self.traits[TRAIT_NAMES.index(name)])

    def trait_dict(self) -> Dict[str, float]:
        return {name: float(value) for name, value in zip(TRAIT_NAMES, self.traits)}

    def record_population(self):
        """Append current population to bounded history"""
        self.population_history.append(self.population)

    def check_invariants(self):
        """Fail loudly on states the engine must never produce"""
        assert self.population >= 0, f"Species {self.species_id} has negative population {self.population}"
        if self.alive:
            assert self.population >= 1, f"Species {self.species_id} alive with population {self.population}"
            assert self.generation_extinct is None
        else:
            assert self.population == 0, f"Extinct species {self.species_id} has population {self.population}"
            assert self.generation_extinct is not None
            assert self.generation_born <= self.generation_extinct

    def to_dict(self) -> dict:
        """
        Serialize species to JSON-compatible dict.

        Returns:
            Dict with all species fields (traits keyed by name)
        """
        return {
            'species_id': self.species_id,
            'name': self.name,
            'traits': self.trait_dict(),
            'population': int(self.population),
            'fitness': float(self.fitness),
            'alive': self.alive,
            'generation_born': self.generation_born,
            'generation_extinct': self.generation_extinct,
            'parent_id': self.parent_id,
            'population_history': [int(p) for p in self.population_history],
        }

    @classmethod
    def from_dict(cls, data: dict, history_window: int = HISTORY_WINDOW) -> 'Species':
        """
        Deserialize species from dict produced by to_dict().

        Args:
            data: Dict with species fields
            history_window: Capacity for restored population history

        Returns:
            Species instance
        """
        traits = data['traits']
        if isinstance(traits, dict):
            traits = [traits[name] for name in TRAIT_NAMES]

        return cls(
            species_id=data['species_id'],
            name=data['name'],
            traits=np.array(traits, dtype=np.float64),
            population=int(data['population']),
            generation_born=data['generation_born'],
            parent_id=data.get('parent_id'),
            fitness=float(data.get('fitness', FITNESS_INITIAL)),
            alive=data.get('alive', True),
            generation_extinct=data.get('generation_extinct'),
            population_history=data.get('population_history'),
            history_window=history_window
        )


class SpeciesRegistry:
    """
    Owns every species of a run, living and extinct.

    Ids are assigned from a counter that only increases.
    """

    def __init__(self, max_population: int = MAX_POPULATION, history_window: int = HISTORY_WINDOW):
        self.max_population = max_population
        self.history_window = history_window
        self._species: Dict[int, Species] = {}
        self._next_id: int = 0

    def __len__(self) -> int:
        return len(self._species)

    def __iter__(self) -> Iterator[Species]:
        return iter(self._species.values())

    def __contains__(self, species_id: int) -> bool:
        return species_id in self._species

    @property
    def next_id(self) -> int:
        return self._next_id

    def get(self, species_id: int) -> Species:
        """Look up species by id (KeyError if unknown)"""
        return self._species[species_id]

    def all(self) -> List[Species]:
        """All species in creation order"""
        return list(self._species.values())

    def alive(self) -> List[Species]:
        """Living species in creation order"""
        return [sp for sp in self._species.values() if sp.alive]

    def alive_count(self) -> int:
        return sum(1 for sp in self._species.values() if sp.alive)

    def total_population(self) -> int:
        return sum(sp.population for sp in self._species.values() if sp.alive)

    def create(
        self,
        name: str,
        traits,
        population: int,
        generation: int,
        parent_id: Optional[int] = None
    ) -> Species:
        """
        Register a new living species with the next id.

        Args:
            name: Display name
            traits: Trait vector (clipped to [0, 100])
            population: Initial population (clipped to max_population)
            generation: Generation of birth
            parent_id: Parent species id, None for founders

        Returns:
            Newly registered Species
        """
        species = Species(
            species_id=self._next_id,
            name=name,
            traits=traits,
            population=min(int(population), self.max_population),
            generation_born=generation,
            parent_id=parent_id,
            history_window=self.history_window
        )
        self._species[species.species_id] = species
        self._next_id += 1
        return species

    def create_founder(self, rng: RandomSource, generation: int = 0,
                       population: int = FOUNDER_POPULATION) -> Species:
        """Create founder with traits uniform in [20, 80]"""
        traits = rng.uniform_array(FOUNDER_TRAIT_LOW, FOUNDER_TRAIT_HIGH, TRAIT_COUNT)
        return self.create(generate_species_name(rng), traits, population, generation)

    def branch(
        self,
        parent: Species,
        child_fraction: float,
        child_traits,
        name: str,
        generation: int
    ) -> Species:
        """
        Split a living parent into parent + child.

        Child takes floor(p * child_fraction), parent keeps
        ceil(p * (1 - child_fraction)); totals are conserved up to rounding.

        Returns:
            The child species
        """
        assert parent.alive, f"Cannot branch extinct species {parent.species_id}"

        before = parent.population
        child_population = int(math.floor(before * child_fraction))
        # Same as ceil(p * (1 - fraction)), without float rounding artifacts
        parent_population = before - child_population

        assert child_population >= 1, f"Branch of species {parent.species_id} left child empty"
        assert parent_population >= 1, f"Branch of species {parent.species_id} left parent empty"

        parent.population = parent_population
        return self.create(name, child_traits, child_population, generation, parent_id=parent.species_id)

    def mark_extinct(self, species: Species, generation: int):
        """Cull species: terminal transition to alive=False"""
        species.population = 0
        species.alive = False
        species.generation_extinct = generation
        species.check_invariants()
