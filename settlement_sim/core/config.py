"""All tunable constants for the settlement simulation.

Every magic number in the codebase must reference this file.
"""

# =============================================================================
# TIME
# =============================================================================
TICKS_PER_SECOND: int = 20

# =============================================================================
# POPULATION
# =============================================================================
FOOD_PER_POP_PER_SECOND: float = 0.1     # food eaten by each inhabitant
POPULATION_GROWTH_RATE: float = 0.2      # fraction of missing population per second
POPULATION_DECLINE_RATE: float = 0.5     # fraction of population lost per second when starving
DECLINE_UPKEEP_RATIO: float = 2.0        # net food below -ratio * upkeep triggers decline
GROWTH_DEFICIT_FACTOR: float = 0.5       # growth multiplier while net food is negative
POP_ACCUMULATOR_EPSILON: float = 1e-9      # float drift absorbed at whole-unit boundaries

# Stepped growth bonus while net food is non-negative
GROWTH_SURPLUS_STEP: float = 1.0         # food/s of surplus per bonus step
GROWTH_BONUS_PER_STEP: float = 0.1
GROWTH_BONUS_MAX_STEPS: int = 5

# =============================================================================
# JOBS
# =============================================================================
JOB_BASE_INCOME_PER_SECOND: dict[str, float] = {
    "farmer": 0.5,
    "lumberjack": 0.3,
    "stonemason": 0.25,
}
SHORTAGE_MULTIPLIER: float = 0.7         # non-farmer output while the food store is empty
MANUAL_GATHER_AMOUNT: float = 5.0

# =============================================================================
# STARTING CONDITIONS
# =============================================================================
STARTING_HOUSES: int = 1
STARTING_RESOURCES: dict[str, float] = {
    "population": 0.0,
    "stone": 100.0,
    "wood": 100.0,
    "food": 100.0,
}
STARTING_STORAGE: dict[str, float] = {
    "stone": 200.0,
    "wood": 200.0,
    "food": 200.0,
}

# =============================================================================
# EVENTS
# =============================================================================
EVENT_LOG_LIMIT: int = 200
EVENT_TIME_FORMAT: str = "%H:%M:%S"

# =============================================================================
# METRICS
# =============================================================================
METRICS_SAMPLE_INTERVAL: int = TICKS_PER_SECOND  # one snapshot per simulated second

# =============================================================================
# AUTOPLAY
# =============================================================================
AUTOPLAY_FARMER_SHARE: float = 0.4       # fraction of workers kept on food
AUTOPLAY_DECISION_INTERVAL: int = TICKS_PER_SECOND
AUTOPLAY_STORAGE_HEADROOM: float = 0.9   # build storage once a cost needs >90% of a ceiling
SWEEP_SHARES: int = 9                    # grid points between 0.1 and 0.9
