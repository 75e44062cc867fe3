"""
Explosion pipeline - orchestrates synthesis from parameters to WAV file.

Stages:
    1. Pre-explosions (optional "ka-" lead-in)
    2. Main multi-layer explosion, mixed with the pre-explosions
    3. Final speed change
    4. Reverb tail
    5. Silence trimming and a final renormalize
"""

import logging
from pathlib import Path
from typing import Optional, Union

import numpy as np

from .audio_writer import write_wav
from .compositor import accumulate
from .explosion import synthesize_explosion, synthesize_pre_explosions
from .params import ExplosionParameters
from .reverb import ReverbConfig, synthesize_reverb
from .sample_buffer import SampleBuffer, release
from .transforms import change_speed_in_place, renormalize, trim_trailing_silence
from .utils import CHANNELS, frames_to_seconds, make_rng, resolve_seed

logger = logging.getLogger(__name__)


class ExplosionPipeline:
    """
    Runs one explosion synthesis.

    The random stream is created once, from ``seed``, when the pipeline is
    built and is shared by every stage of the run. The resolved seed is kept
    on the instance so a run can be reproduced.

    Usage:
        pipeline = ExplosionPipeline(ExplosionParameters(duration=2.0), seed=7)
        buffer = pipeline.run()
    """

    def __init__(
        self,
        params: ExplosionParameters,
        seed: Optional[int] = None,
        reverb_config: Optional[ReverbConfig] = None
    ):
        self.params = params
        self.seed = resolve_seed(seed)
        self.rng: np.random.Generator = make_rng(self.seed)
        self.reverb_config = reverb_config

    def run(self) -> SampleBuffer:
        """
        Synthesize the finished explosion.

        Returns:
            Buffer with every sample in [-1, 1]
        """
        params = self.params
        logger.info("Generating explosion (seed=%d): %s", self.seed, params.model_dump())

        pre = synthesize_pre_explosions(params, self.rng)

        logger.info("Synthesizing main explosion (%d layers)", params.layer_count)
        main = synthesize_explosion(params.duration, params.layer_count, self.rng)

        if pre is not None:
            accumulate(main, pre)
            renormalize(main)
            release(pre)

        logger.info("Changing speed by factor %.3f", params.final_speed_factor)
        change_speed_in_place(main, params.final_speed_factor)
        trim_trailing_silence(main)

        reverbed = synthesize_reverb(
            main,
            params.early_reflections,
            params.late_reflections,
            self.rng,
            config=self.reverb_config,
        )
        trim_trailing_silence(reverbed)
        # Reflections are summed at full level, bring the peak back under 1.0
        renormalize(reverbed)

        release(main)
        logger.info(
            "Explosion ready: %d samples (%.2fs)",
            reverbed.nsamples, frames_to_seconds(reverbed.nsamples)
        )
        return reverbed

    def render(self, output_path: Union[str, Path], channels: int = CHANNELS) -> bool:
        """Run the pipeline and write the result; returns False if writing fails."""
        buffer = self.run()
        return write_wav(buffer, output_path, channels=channels)


def run(params: ExplosionParameters, seed: Optional[int] = None) -> SampleBuffer:
    """Synthesize an explosion with the given parameters."""
    return ExplosionPipeline(params, seed=seed).run()


def generate_explosion_file(
    params: ExplosionParameters,
    output_path: Union[str, Path],
    seed: Optional[int] = None
) -> bool:
    """
    Synthesize an explosion and save it as a mono 16-bit WAV file.

    Returns:
        True if the file was written
    """
    return ExplosionPipeline(params, seed=seed).render(output_path)
