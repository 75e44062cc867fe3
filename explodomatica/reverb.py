"""
Reflection Reverb - a synthetic reverb tail built from discrete echoes.

Instead of convolving with an impulse response, each reflection is a
low-passed, randomly delayed copy of a running echo signal that is
attenuated after every use. Reflections therefore arrive later, quieter
and duller as they accumulate, approximating a room's decay.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from .compositor import accumulate
from .sample_buffer import SampleBuffer, allocate, copy_buffer, release
from .transforms import amplify_and_clip, delay_shift, sliding_low_pass
from .utils import SAMPLE_RATE

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReflectionConfig:
    """Shape of one family of reflections."""
    alpha_start: float              # Low-pass coefficient at the start
    alpha_end: float                # Low-pass coefficient at the end
    gain_range: Tuple[float, float]  # Attenuation applied to the running echo
    max_delay_ms: float             # Random delay window


@dataclass(frozen=True)
class ReverbConfig:
    """Reverb configuration."""
    early: ReflectionConfig = ReflectionConfig(
        alpha_start=0.5, alpha_end=0.5, gain_range=(0.03, 0.06), max_delay_ms=300.0
    )
    late: ReflectionConfig = ReflectionConfig(
        alpha_start=0.5, alpha_end=0.2, gain_range=(0.03, 0.04), max_delay_ms=2000.0
    )
    tail_factor: int = 2            # Output length as a multiple of the input


class ReflectionReverb:
    """
    Poor man's reverb built from accumulated reflections.

    Usage:
        reverb = ReflectionReverb(rng)
        wet = reverb.process(buffer, early_reflections=10, late_reflections=50)
    """

    def __init__(
        self,
        rng: np.random.Generator,
        config: Optional[ReverbConfig] = None,
        sample_rate: int = SAMPLE_RATE
    ):
        self.rng = rng
        self.config = config or ReverbConfig()
        self.sample_rate = sample_rate

    def max_delay_samples(self, reflection: ReflectionConfig) -> int:
        return int(reflection.max_delay_ms * self.sample_rate / 1000)

    def prepare(self, buffer: SampleBuffer) -> SampleBuffer:
        """Copy the dry signal into a buffer long enough to hold the tail."""
        length = buffer.nsamples * self.config.tail_factor
        output = allocate(length)
        output.data[:buffer.nsamples] = buffer.samples
        output.nsamples = length
        return output

    def add_reflection(
        self,
        output: SampleBuffer,
        echo: SampleBuffer,
        reflection: ReflectionConfig
    ) -> None:
        """
        Mix one reflection of ``echo`` into ``output``.

        The filtered copy is taken before the running echo is attenuated,
        so the echo keeps losing level and brightness across calls.
        """
        reflected = sliding_low_pass(echo, reflection.alpha_start, reflection.alpha_end)

        low, high = reflection.gain_range
        amplify_and_clip(echo, self.rng.uniform(low, high))

        delay = int(self.rng.integers(0, self.max_delay_samples(reflection), endpoint=True))
        delay_shift(reflected, delay)

        accumulate(output, reflected)
        release(reflected)

    def process(
        self,
        buffer: SampleBuffer,
        early_reflections: int,
        late_reflections: int
    ) -> SampleBuffer:
        """
        Apply the reverb.

        Args:
            buffer: Dry input (not modified)
            early_reflections: Number of short, bright reflections
            late_reflections: Number of long, darkening reflections

        Returns:
            New buffer of ``tail_factor`` times the input length
        """
        logger.info(
            "Calculating reverb: %d early, %d late reflections",
            early_reflections, late_reflections
        )
        output = self.prepare(buffer)
        echo = copy_buffer(output)

        for i in range(early_reflections):
            self.add_reflection(output, echo, self.config.early)
            logger.debug("Early reflection %d/%d", i + 1, early_reflections)

        for i in range(late_reflections):
            self.add_reflection(output, echo, self.config.late)
            logger.debug("Late reflection %d/%d", i + 1, late_reflections)

        release(echo)
        return output


def synthesize_reverb(
    buffer: SampleBuffer,
    early_reflections: int,
    late_reflections: int,
    rng: np.random.Generator,
    config: Optional[ReverbConfig] = None
) -> SampleBuffer:
    """
    Quick reverb application.

    Args:
        buffer: Dry input
        early_reflections: Number of early reflections
        late_reflections: Number of late reflections
        rng: Random stream
        config: Optional reverb configuration override

    Returns:
        Buffer with reverb tail, twice the input length by default
    """
    reverb = ReflectionReverb(rng, config=config)
    return reverb.process(buffer, early_reflections, late_reflections)
