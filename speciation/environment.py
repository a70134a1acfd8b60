"""
Environment state.

Holds current temperature, moisture and resources for a run. Each tick the
clock applies active event effects, then pulls every field a fixed fraction
of the way back toward the ecosystem baseline. Both happen before fitness is
computed for that tick.
"""

from dataclasses import dataclass
from typing import Iterable

from .data_types import EcosystemPreset
from .constants import (
    MOISTURE_MIN,
    MOISTURE_MAX,
    RESOURCES_MIN,
    RESOURCES_MAX,
    TEMPERATURE_REVERSION_RATE,
    MOISTURE_REVERSION_RATE,
    RESOURCES_REVERSION_RATE,
)


def clamp(value: float, low: float, high: float) -> float:
    """Clamp scalar to [low, high]"""
    return max(low, min(high, value))


@dataclass
class Environment:
    """
    Mutable environmental conditions.

    Attributes:
        temperature: Celsius, unclamped (practically -10..45)
        moisture: 0-100, clamped after every mutation
        resources: 2-100, clamped after every mutation
    """
    temperature: float
    moisture: float
    resources: float

    def __post_init__(self):
        self.temperature = float(self.temperature)
        self._clamp()

    @classmethod
    def from_preset(cls, preset: EcosystemPreset) -> 'Environment':
        """Create environment at the preset baseline"""
        return cls(
            temperature=preset.temperature,
            moisture=preset.moisture,
            resources=preset.resources
        )

    def initialize(self, preset: EcosystemPreset):
        """Reset current conditions to the preset baseline"""
        self.temperature = float(preset.temperature)
        self.moisture = float(preset.moisture)
        self.resources = float(preset.resources)
        self._clamp()

    def apply_event_effects(self, active_events: Iterable):
        """
        Add this tick's contribution of every active event.

        Rapid events contribute their full effect, gradual events effect/duration.
        Deltas are summed per field before clamping, so event order does not
        affect the result.

        Args:
            active_events: ActiveEvent instances (anything with .definition)
        """
        d_temperature = 0.0
        d_moisture = 0.0
        d_resources = 0.0

        for active in active_events:
            definition = active.definition
            factor = definition.rate_factor
            d_temperature += definition.effect.temperature * factor
            d_moisture += definition.effect.moisture * factor
            d_resources += definition.effect.resources * factor

        self.temperature += d_temperature
        self.moisture += d_moisture
        self.resources += d_resources
        self._clamp()

    def revive_toward_baseline(self, preset: EcosystemPreset):
        """
        Pull each field a fixed fraction of its gap back toward baseline.

        Absent new events the state approaches the baseline asymptotically.
        """
        self.temperature += (preset.temperature - self.temperature) * TEMPERATURE_REVERSION_RATE
        self.moisture += (preset.moisture - self.moisture) * MOISTURE_REVERSION_RATE
        self.resources += (preset.resources - self.resources) * RESOURCES_REVERSION_RATE
        self._clamp()

    def deviation_from(self, preset: EcosystemPreset) -> float:
        """Largest absolute per-field distance from the preset baseline"""
        return max(
            abs(self.temperature - preset.temperature),
            abs(self.moisture - preset.moisture),
            abs(self.resources - preset.resources)
        )

    def _clamp(self):
        self.moisture = clamp(float(self.moisture), MOISTURE_MIN, MOISTURE_MAX)
        self.resources = clamp(float(self.resources), RESOURCES_MIN, RESOURCES_MAX)

    def to_dict(self) -> dict:
        return {
            'temperature': float(self.temperature),
            'moisture': float(self.moisture),
            'resources': float(self.resources),
        }
