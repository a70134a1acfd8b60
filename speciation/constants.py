"""
Central configuration constants for the speciation simulation.

Defines default values, thresholds, and rates used across multiple modules.
Values here seed SimulationConfig; data/simulation.yaml may override them.
"""

# ============================================================================
# Traits
# ============================================================================

# Order of the trait vector carried by every species
TRAIT_NAMES = ('size', 'speed', 'camouflage', 'diet', 'thermo_regulation')
TRAIT_COUNT = len(TRAIT_NAMES)

TRAIT_MIN = 0.0
TRAIT_MAX = 100.0

# Founder traits are drawn uniformly from this range
FOUNDER_TRAIT_LOW = 20.0
FOUNDER_TRAIT_HIGH = 80.0


# ============================================================================
# Environment Bounds and Resilience
# ============================================================================

MOISTURE_MIN = 0.0
MOISTURE_MAX = 100.0
RESOURCES_MIN = 2.0
RESOURCES_MAX = 100.0

# Fraction of the distance-to-baseline recovered per tick
TEMPERATURE_REVERSION_RATE = 0.01
MOISTURE_REVERSION_RATE = 0.008
RESOURCES_REVERSION_RATE = 0.005


# ============================================================================
# Fitness
# ============================================================================

FITNESS_MIN = 5.0
FITNESS_MAX = 95.0
FITNESS_INITIAL = 50.0

# Ambient temperature at which thermo_regulation=50 is optimal (Celsius)
THERMAL_REFERENCE_C = 15.0


# ============================================================================
# Population Dynamics
# ============================================================================

MAX_POPULATION = 120
FOUNDER_POPULATION = 60

# Fitness at which growth rate is zero
GROWTH_NEUTRAL_FITNESS = 45.0
GROWTH_RATE_DIVISOR = 200.0

# Demographic noise (std dev, individuals per tick)
DEMOGRAPHIC_NOISE_SCALE = 3.0

# Soft carrying capacity: damping starts above this fraction of MAX_POPULATION
CAP_PRESSURE_THRESHOLD = 0.8
CAP_PRESSURE_STRENGTH = 8.0


# ============================================================================
# Speciation and Trait Drift
# ============================================================================

SPECIATION_PROBABILITY = 0.008
SPECIATION_MIN_POPULATION = 50
SPECIATION_MIN_FITNESS = 40.0

# Ceiling on concurrently alive species for speciation
MAX_ALIVE_SPECIES = 10

# Fraction of the parent population that leaves with the child
SPECIATION_CHILD_FRACTION = 0.3

# Inheritance noise at speciation vs. background drift every tick
INHERITANCE_NOISE_SCALE = 15.0
TRAIT_DRIFT_SCALE = 0.5


# ============================================================================
# Split Events (geographic barrier)
# ============================================================================

SPLIT_MIN_POPULATION = 20
SPLIT_CHILD_FRACTION = 0.4


# ============================================================================
# History and Event Log
# ============================================================================

# Samples kept per species population history and for diversity history
HISTORY_WINDOW = 80

# Entries kept in the event log
EVENT_LOG_CAPACITY = 80

# Entries returned in snapshot event_log tail
EVENT_LOG_TAIL = 20


# ============================================================================
# Scheduling
# ============================================================================

# Wall-clock interval between ticks at 1x speed (seconds)
BASE_TICK_INTERVAL_S = 1.2

# Speed multipliers offered to the presentation layer
SPEED_CHOICES = (0.5, 1.0, 2.0, 4.0)


# ============================================================================
# Performance Configuration
# ============================================================================

# Tick timing window for rolling average
TICK_TIME_WINDOW = 100  # Number of ticks to average
