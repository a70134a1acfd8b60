"""
Fitness model: (traits, environment) -> scalar in [5, 95].

Thermal mismatch is penalized, camouflage and diet only pay off when
resources and moisture support them, raw resource abundance contributes up
to +20, and speed gives a small flat bonus.
"""

import numpy as np

from .constants import TRAIT_NAMES, FITNESS_MIN, FITNESS_MAX, THERMAL_REFERENCE_C

_SPEED = TRAIT_NAMES.index('speed')
_CAMOUFLAGE = TRAIT_NAMES.index('camouflage')
_DIET = TRAIT_NAMES.index('diet')
_THERMO = TRAIT_NAMES.index('thermo_regulation')


def optimal_thermo_regulation(temperature: float) -> float:
    """thermo_regulation value with zero thermal penalty at this temperature"""
    return 50.0 + (temperature - THERMAL_REFERENCE_C) * 1.5


def compute_fitness(traits: np.ndarray, environment) -> float:
    """
    Compute fitness of a trait vector under current conditions.

    Args:
        traits: (5,) array ordered as TRAIT_NAMES
        environment: Anything with temperature, moisture, resources

    Returns:
        Fitness clamped to [5, 95]
    """
    resources = environment.resources
    moisture = environment.moisture

    score = 50.0
    score -= abs(traits[_THERMO] - optimal_thermo_regulation(environment.temperature)) * 0.3
    score += (traits[_CAMOUFLAGE] * resources / 100.0) * 0.2
    score += (traits[_DIET] * moisture / 100.0) * 0.15
    score += (resources / 100.0) * 20.0
    score += traits[_SPEED] * 0.1

    return float(min(FITNESS_MAX, max(FITNESS_MIN, score)))
