"""
Explosion parameters - the validated configuration of one synthesis run.

Values are checked once, here, at the configuration boundary; the DSP
functions downstream assume sane input. Instances are frozen and are never
modified after construction: overrides and mutations build new instances.
"""

from typing import Any, Dict, Tuple

import numpy as np
from pydantic import BaseModel, ConfigDict, Field


# Slider ranges of the interactive front end: (min, max)
MUTATION_RANGES: Dict[str, Tuple[float, float]] = {
    "layer_count": (1, 6),
    "duration": (0.2, 60.0),
    "preexplosions": (0, 5),
    "preexplosion_delay": (0.1, 3.0),
    "preexplosion_low_pass_factor": (0.2, 0.9),
    "preexplosion_lp_iterations": (0, 10),
    "final_speed_factor": (0.1, 10.0),
    "early_reflections": (1, 50),
    "late_reflections": (1, 2000),
}

INTEGER_FIELDS = (
    "layer_count",
    "preexplosions",
    "preexplosion_lp_iterations",
    "early_reflections",
    "late_reflections",
)

# Counts that switch a stage off at zero
STAGE_COUNT_FIELDS = (
    "preexplosions",
    "preexplosion_lp_iterations",
    "early_reflections",
    "late_reflections",
)


class ExplosionParameters(BaseModel):
    """Validated, immutable parameters for one explosion.

    Defaults reproduce the classic 4 second, 4 layer explosion with a
    single pre-explosion, slowed down 4x and given a reverb tail.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    duration: float = Field(default=4.0, gt=0.0, description="Duration in seconds")
    layer_count: int = Field(default=4, ge=1, description="Noise layers per explosion")
    preexplosions: int = Field(default=1, ge=0, description="Number of pre-explosions")
    preexplosion_delay: float = Field(
        default=0.2, ge=0.0, description="Window for random pre-explosion offsets (s)"
    )
    preexplosion_low_pass_factor: float = Field(
        default=0.5, gt=0.0, lt=1.0, description="Pre-explosion low-pass coefficient"
    )
    preexplosion_lp_iterations: int = Field(
        default=1, ge=0, description="Times the pre-explosion low-pass is applied"
    )
    final_speed_factor: float = Field(
        default=0.25, gt=0.0, description="Final speed change (<1 slows down)"
    )
    early_reflections: int = Field(default=10, ge=0, description="Reverb early reflections")
    late_reflections: int = Field(default=50, ge=0, description="Reverb late reflections")

    def with_overrides(self, **overrides: Any) -> "ExplosionParameters":
        """Return a validated copy with the given fields replaced.

        ``None`` values are ignored so unset CLI options can be passed
        straight through.
        """
        values = self.model_dump()
        values.update({k: v for k, v in overrides.items() if v is not None})
        return ExplosionParameters(**values)

    def mutate(self, rng: np.random.Generator, amount: float = 0.1) -> "ExplosionParameters":
        """Randomly alter every parameter by a small amount.

        Each field moves by up to ``amount`` of its slider range and is
        clamped back into that range, widened to include the starting value.
        Stages switched off with a zero count stay off.

        Args:
            rng: Random stream
            amount: Fraction of each range to move by at most

        Returns:
            New mutated parameters
        """
        values = self.model_dump()
        for name, (low, high) in MUTATION_RANGES.items():
            start = values[name]
            # Drawn for every field so the stream advances the same way
            value = start + rng.uniform(-amount, amount) * (high - low)
            if name in STAGE_COUNT_FIELDS and start == 0:
                continue
            value = min(max(value, min(low, start)), max(high, start))
            if name in INTEGER_FIELDS:
                value = int(round(value))
            values[name] = value
        return ExplosionParameters(**values)


DEFAULT_PARAMETERS = ExplosionParameters()
