"""
Event engine: active environmental perturbations.

Manages the set of currently active events (at most one instance per event
id), runs their special behavior at trigger time, and counts them down once
per tick after their effects have been applied.
"""

from dataclasses import dataclass
from typing import List, Optional

from .data_types import EventDefinition, SpecialEffect
from .species import SpeciesRegistry, Species, generate_species_name
from .event_log import EventLog, LogKind
from .rng import RandomSource
from .constants import SPLIT_MIN_POPULATION, SPLIT_CHILD_FRACTION


@dataclass
class ActiveEvent:
    """
    Event definition in effect with remaining duration.

    Attributes:
        definition: Immutable event template
        remaining_ticks: Ticks left, removed when it reaches zero
        generation_triggered: Generation at which the event was triggered
        split_child_id: Species created by a split special (None if none)
    """
    definition: EventDefinition
    remaining_ticks: int
    generation_triggered: int = 0
    split_child_id: Optional[int] = None

    @property
    def event_id(self) -> str:
        return self.definition.event_id

    def to_dict(self) -> dict:
        return {
            'event_id': self.definition.event_id,
            'name': self.definition.name,
            'rate': self.definition.rate.value,
            'remaining_ticks': self.remaining_ticks,
            'duration': self.definition.duration,
            'generation_triggered': self.generation_triggered,
        }


class EventEngine:
    """Active event set for one run"""

    def __init__(self, registry: SpeciesRegistry, rng: RandomSource, log: EventLog):
        self.registry = registry
        self.rng = rng
        self.log = log
        self._active: List[ActiveEvent] = []

    @property
    def active(self) -> List[ActiveEvent]:
        """Active events in trigger order (copy)"""
        return list(self._active)

    def active_ids(self) -> List[str]:
        return [a.event_id for a in self._active]

    def is_active(self, event_id: str) -> bool:
        return any(a.event_id == event_id for a in self._active)

    def clear(self):
        self._active.clear()

    def trigger(self, definition: EventDefinition, generation: int) -> Optional[ActiveEvent]:
        """
        Activate an event.

        Rejected (returns None) if an event with the same id is already active.
        A split special runs immediately, within this call.

        Args:
            definition: Event template
            generation: Current generation (for log entries and births)

        Returns:
            The new ActiveEvent, or None when rejected
        """
        if self.is_active(definition.event_id):
            print(f"[WARN] Event '{definition.event_id}' already active, trigger rejected")
            return None

        active = ActiveEvent(
            definition=definition,
            remaining_ticks=definition.duration,
            generation_triggered=generation
        )
        self._active.append(active)
        self.log.append(generation, f"{definition.name}: {definition.description}", LogKind.EVENT)

        if definition.special is SpecialEffect.SPLIT:
            child = self._apply_split(generation)
            if child is not None:
                active.split_child_id = child.species_id
        elif definition.special is SpecialEffect.NONE:
            pass
        else:
            raise ValueError(f"Unhandled special effect {definition.special}")

        return active

    def _apply_split(self, generation: int) -> Optional[Species]:
        """
        Fork one random living species with population > 20.

        Child copies parent traits unchanged and takes 40% of the population.

        Returns:
            Child species, or None if no species qualifies
        """
        candidates = [sp for sp in self.registry.alive() if sp.population > SPLIT_MIN_POPULATION]
        if not candidates:
            print(f"[WARN] No species above population {SPLIT_MIN_POPULATION}, split skipped")
            return None

        parent = candidates[self.rng.integers(len(candidates))]
        child = self.registry.branch(
            parent,
            child_fraction=SPLIT_CHILD_FRACTION,
            child_traits=parent.traits.copy(),
            name=generate_species_name(self.rng),
            generation=generation
        )
        self.log.append(generation, f"Population split! {parent.name} -> {child.name}", LogKind.SPLIT)
        return child

    def decay(self):
        """
        Count every active event down one tick, dropping expired ones.

        Must run after effects are applied, so an event contributes on the
        tick it expires.
        """
        for active in self._active:
            active.remaining_ticks -= 1
        self._active = [a for a in self._active if a.remaining_ticks > 0]
