"""
Data types mirroring YAML catalog structures.

These dataclasses are populated by loader.py from YAML files. Catalog entries
(presets, event definitions) are immutable reference data.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Any
from enum import Enum

from . import constants


# ============================================================================
# Ecosystem Presets
# ============================================================================

@dataclass(frozen=True)
class EcosystemPreset:
    """Named baseline environment a run starts from"""
    preset_id: str
    name: str
    temperature: float  # Celsius
    moisture: float  # 0-100
    resources: float  # 2-100
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'preset_id': self.preset_id,
            'name': self.name,
            'temperature': float(self.temperature),
            'moisture': float(self.moisture),
            'resources': float(self.resources),
        }


# ============================================================================
# Environmental Event Definitions
# ============================================================================

class EventRate(Enum):
    """How an event's effect is delivered over its duration"""
    RAPID = "rapid"  # Full effect every tick while active
    GRADUAL = "gradual"  # effect / duration every tick while active


class SpecialEffect(Enum):
    """Extra behavior run once when an event is triggered"""
    NONE = "none"
    SPLIT = "split"  # Fork one living species into two


@dataclass(frozen=True)
class EventEffect:
    """Per-tick effect vector (full magnitude)"""
    temperature: float = 0.0
    moisture: float = 0.0
    resources: float = 0.0


@dataclass(frozen=True)
class EventDefinition:
    """Environmental event template"""
    event_id: str
    name: str
    description: str
    effect: EventEffect
    rate: EventRate
    duration: int  # ticks, >= 1
    special: SpecialEffect = SpecialEffect.NONE

    def __post_init__(self):
        if self.duration < 1:
            raise ValueError(f"Event {self.event_id} duration must be >= 1, got {self.duration}")

    @property
    def rate_factor(self) -> float:
        """Fraction of the full effect applied per tick"""
        if self.rate is EventRate.RAPID:
            return 1.0
        return 1.0 / self.duration

    def to_dict(self) -> Dict[str, Any]:
        return {
            'event_id': self.event_id,
            'name': self.name,
            'description': self.description,
            'effect': {
                'temperature': self.effect.temperature,
                'moisture': self.effect.moisture,
                'resources': self.effect.resources,
            },
            'rate': self.rate.value,
            'duration': self.duration,
            'special': self.special.value,
        }


# ============================================================================
# Simulation Configuration
# ============================================================================

@dataclass
class SimulationConfig:
    """Simulation tunables (defaults from constants.py)"""
    max_population: int = constants.MAX_POPULATION
    founder_population: int = constants.FOUNDER_POPULATION
    max_alive_species: int = constants.MAX_ALIVE_SPECIES
    speciation_probability: float = constants.SPECIATION_PROBABILITY
    history_window: int = constants.HISTORY_WINDOW
    event_log_capacity: int = constants.EVENT_LOG_CAPACITY
    event_log_tail: int = constants.EVENT_LOG_TAIL
    base_tick_interval_s: float = constants.BASE_TICK_INTERVAL_S
    default_preset: str = "temperate"


@dataclass
class Catalog:
    """Loaded reference data: presets, events and simulation config"""
    presets: Dict[str, EcosystemPreset] = field(default_factory=dict)
    events: Dict[str, EventDefinition] = field(default_factory=dict)
    simulation: SimulationConfig = field(default_factory=SimulationConfig)
